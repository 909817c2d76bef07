"""Manifest generation and persistence for directory trees."""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from tree_transfer.checksum import ChecksumCalculator
from tree_transfer.errors import WalkError
from tree_transfer.models import FileChecksum, FileFailure, TransferManifest
from tree_transfer.walker import relative_posix, walk_files

logger = logging.getLogger(__name__)

DEFAULT_FILENAME_TEMPLATE = "manifest-{timestamp}.json"


@dataclass
class ManifestBuildResult:
    """A built manifest together with the files that had to be skipped."""
    
    manifest: TransferManifest
    failures: List[FileFailure] = field(default_factory=list)


class ManifestGenerator:
    """Generate checksum manifests for directory trees."""
    
    def __init__(self, checksum_calculator: Optional[ChecksumCalculator] = None):
        """Initialize the generator."""
        self.checksum_calculator = checksum_calculator or ChecksumCalculator()
    
    def build(self, root: Union[str, Path]) -> ManifestBuildResult:
        """
        Walk root and checksum every file found.
        
        Sizes come from filesystem metadata. A file that cannot be hashed or
        stat'ed is left out of the manifest and reported in ``failures``
        instead of aborting the whole build.
        
        Args:
            root: Directory to walk
            
        Returns:
            ManifestBuildResult with the manifest and per-file failures
            
        Raises:
            WalkError: If a directory under root cannot be listed
        """
        root = Path(root)
        entries: List[FileChecksum] = []
        failures: List[FileFailure] = []
        total_size = 0
        
        try:
            for file_path in walk_files(root):
                relative_path = relative_posix(file_path, root)
                try:
                    checksum = self.checksum_calculator.calculate_sha256(file_path)
                    size = file_path.stat().st_size
                except OSError as e:
                    logger.warning("Skipping %s: %s", relative_path, e)
                    failures.append(FileFailure(path=relative_path, error=str(e)))
                    continue
                
                entries.append(FileChecksum(path=relative_path, checksum=checksum))
                total_size += size
        except OSError as e:
            raise WalkError(f"Failed to walk directory: {e}") from e
        
        manifest = TransferManifest.from_entries(entries, total_size=total_size)
        logger.debug(
            "Built manifest for %s: %d files, %d bytes, %d skipped",
            root, manifest.file_count, manifest.total_size, len(failures)
        )
        return ManifestBuildResult(manifest=manifest, failures=failures)
    
    def generate_manifest_filename(self, template: str = DEFAULT_FILENAME_TEMPLATE) -> str:
        """Generate a timestamped manifest filename from a template."""
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        return template.format(timestamp=timestamp)
    
    def save_manifest(self, manifest: TransferManifest, output_path: Union[str, Path]) -> None:
        """Save manifest to a JSON file, creating parent directories as needed."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        
        with open(output_path, "w") as f:
            json.dump(manifest.to_dict(), f, indent=2)
    
    def load_manifest(self, manifest_path: Union[str, Path]) -> TransferManifest:
        """
        Load a manifest previously written by save_manifest.
        
        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is not a valid manifest
        """
        with open(manifest_path, "r") as f:
            data = json.load(f)
        
        if not isinstance(data, dict):
            raise ValueError(f"Manifest {manifest_path} is not a JSON object")
        try:
            return TransferManifest.from_dict(data)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Manifest {manifest_path} is malformed: {e}") from e
