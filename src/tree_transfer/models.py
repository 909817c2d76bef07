"""Value objects passed between the transfer engine components."""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Optional, Tuple


@dataclass(frozen=True)
class FileChecksum:
    """Checksum of a single file, keyed by its path relative to the transfer root."""
    
    path: str
    checksum: str
    
    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "checksum": self.checksum}


@dataclass(frozen=True)
class TransferManifest:
    """
    Immutable record of a directory tree captured at one point in time.
    
    Attributes:
        checksums: One entry per file, in walk order
        total_size: Sum of on-disk sizes of the recorded files (bytes)
        file_count: Number of recorded files
    """
    
    checksums: Tuple[FileChecksum, ...] = ()
    total_size: int = 0
    file_count: int = 0
    
    def __post_init__(self):
        # Accept any iterable but always store a tuple
        object.__setattr__(self, "checksums", tuple(self.checksums))
        if self.file_count != len(self.checksums):
            raise ValueError(
                f"file_count ({self.file_count}) does not match "
                f"number of checksums ({len(self.checksums)})"
            )
        if self.total_size < 0:
            raise ValueError("total_size must be non-negative")
    
    @classmethod
    def from_entries(cls, entries: Iterable[FileChecksum], total_size: int) -> "TransferManifest":
        """Build a manifest, deriving file_count from the entries."""
        checksums = tuple(entries)
        return cls(checksums=checksums, total_size=total_size, file_count=len(checksums))
    
    def checksum_set(self) -> FrozenSet[Tuple[str, str]]:
        """Return (path, checksum) pairs, ignoring walk order."""
        return frozenset((entry.path, entry.checksum) for entry in self.checksums)
    
    def to_dict(self) -> Dict:
        return {
            "checksums": [entry.to_dict() for entry in self.checksums],
            "total_size": self.total_size,
            "file_count": self.file_count,
        }
    
    @classmethod
    def from_dict(cls, data: Dict) -> "TransferManifest":
        """Rebuild a manifest from its JSON form."""
        checksums = [
            FileChecksum(path=item["path"], checksum=item["checksum"])
            for item in data.get("checksums", [])
        ]
        return cls(
            checksums=tuple(checksums),
            total_size=int(data.get("total_size", 0)),
            file_count=int(data.get("file_count", len(checksums))),
        )


@dataclass(frozen=True)
class TransferOptions:
    """Caller supplied options for a single transfer."""
    
    source_path: Path
    target_path: Path
    create_archive: bool = False
    verify_transfer: bool = False
    
    def __post_init__(self):
        object.__setattr__(self, "source_path", Path(self.source_path))
        object.__setattr__(self, "target_path", Path(self.target_path))


@dataclass
class TransferProgress:
    """Progress update streamed on the transfer-progress event."""
    
    status: str
    current_file: Optional[str] = None
    processed_files: int = 0
    total_files: int = 0
    processed_size: int = 0
    total_size: int = 0
    
    def to_dict(self) -> Dict:
        return {
            "status": self.status,
            "current_file": self.current_file,
            "processed_files": self.processed_files,
            "total_files": self.total_files,
            "processed_size": self.processed_size,
            "total_size": self.total_size,
        }


@dataclass
class TransferResult:
    """Terminal outcome of a transfer or verification."""
    
    success: bool
    message: str
    transferred_files: int = 0
    total_size: int = 0
    
    def to_dict(self) -> Dict:
        return {
            "success": self.success,
            "message": self.message,
            "transferred_files": self.transferred_files,
            "total_size": self.total_size,
        }


@dataclass(frozen=True)
class FileFailure:
    """A file that was skipped because reading, hashing or copying it failed."""
    
    path: str
    error: str
