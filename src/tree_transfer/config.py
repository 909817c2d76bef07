"""Configuration for the transfer engine."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from tree_transfer.checksum import DEFAULT_CHUNK_SIZE

ENV_PREFIX = "TREE_TRANSFER_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(ENV_PREFIX + name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class TransferConfig:
    """Defaults for transfers started without explicit options."""
    
    create_archive: bool = False
    verify_transfer: bool = True
    chunk_size: int = DEFAULT_CHUNK_SIZE
    temp_dir: Optional[Path] = None


@dataclass
class ManifestConfig:
    """Manifest file naming."""
    
    filename_template: str = "manifest-{timestamp}.json"


@dataclass
class Config:
    """Top-level configuration."""
    
    transfer: TransferConfig = field(default_factory=TransferConfig)
    manifest: ManifestConfig = field(default_factory=ManifestConfig)
    verbose: bool = False
    config_dir: Path = field(default_factory=lambda: Path.home() / ".tree-transfer")
    
    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from TREE_TRANSFER_* environment variables."""
        return cls().apply_env()
    
    @classmethod
    def load(cls, user_config: Optional[Dict[str, Any]] = None) -> "Config":
        """Defaults, then saved user config, then environment variables."""
        return cls().apply_user_config(user_config).apply_env()
    
    def apply_env(self) -> "Config":
        """Overlay TREE_TRANSFER_* environment variables onto this config."""
        self.transfer.create_archive = _env_flag("CREATE_ARCHIVE", self.transfer.create_archive)
        self.transfer.verify_transfer = _env_flag("VERIFY", self.transfer.verify_transfer)
        self.verbose = _env_flag("VERBOSE", self.verbose)
        
        chunk_size = os.environ.get(ENV_PREFIX + "CHUNK_SIZE")
        if chunk_size:
            self.transfer.chunk_size = int(chunk_size)
        
        temp_dir = os.environ.get(ENV_PREFIX + "TEMP_DIR")
        if temp_dir:
            self.transfer.temp_dir = Path(temp_dir)
        
        return self
    
    def apply_user_config(self, user_config: Optional[Dict[str, Any]]) -> "Config":
        """
        Overlay saved user defaults (see config_manager) onto this config.
        
        Raises:
            ValueError: If user_config is not a mapping
        """
        if user_config is None:
            return self
        if not isinstance(user_config, dict):
            raise ValueError(
                f"User configuration must be a mapping, got {type(user_config).__name__}"
            )
        
        if "create_archive" in user_config:
            self.transfer.create_archive = bool(user_config["create_archive"])
        if "verify_transfer" in user_config:
            self.transfer.verify_transfer = bool(user_config["verify_transfer"])
        if user_config.get("temp_dir"):
            self.transfer.temp_dir = Path(user_config["temp_dir"])
        return self
