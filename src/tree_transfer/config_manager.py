"""User configuration file management."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from tree_transfer.config import Config


def get_config_path(config: Optional[Config] = None) -> Path:
    """Return the path of the user configuration file inside config.config_dir."""
    config = config or Config()
    return config.config_dir / "config.yaml"


def load_config(config_path: Path) -> Optional[Dict[str, Any]]:
    """
    Load user configuration from a YAML file.
    
    Returns:
        The parsed configuration, or None if the file does not exist
        
    Raises:
        yaml.YAMLError: If the file is not valid YAML
    """
    if not config_path.exists():
        return None
    
    with open(config_path, "r") as f:
        return yaml.safe_load(f)


def save_config(config_path: Path, config_data: Dict[str, Any]) -> None:
    """Save user configuration as block-style YAML, creating the directory if needed."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    
    with open(config_path, "w") as f:
        yaml.safe_dump(config_data, f, default_flow_style=False, sort_keys=False)
