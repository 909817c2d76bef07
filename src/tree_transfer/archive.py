"""Gzip-compressed tar transport for whole directory trees."""

import logging
import tarfile
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from tree_transfer.errors import ArchiveError
from tree_transfer.walker import relative_posix, walk_files

logger = logging.getLogger(__name__)


@dataclass
class ArchiveSummary:
    """What went into an archive."""
    
    file_count: int = 0
    total_size: int = 0


class ArchiveTransport:
    """Serialize a file tree into a .tar.gz and expand it back."""
    
    def create_archive(self, source: Union[str, Path], archive_path: Union[str, Path]) -> ArchiveSummary:
        """
        Add every file under source to a new gzip tar archive.
        
        Entry names are the files' paths relative to source, so the archive
        can be extracted without a manifest. Files are added in walk order;
        symlinked files are stored as the content they point to.
        Any failure aborts the build and the partial archive is removed.
        
        Args:
            source: Directory to archive
            archive_path: Archive file to create
            
        Returns:
            ArchiveSummary with the number and total size of archived files
            
        Raises:
            ArchiveError: If walking, reading or writing fails
        """
        source = Path(source)
        archive_path = Path(archive_path)
        summary = ArchiveSummary()
        
        try:
            with tarfile.open(archive_path, "w:gz", dereference=True) as tar:
                for file_path in walk_files(source):
                    arcname = relative_posix(file_path, source)
                    tar.add(file_path, arcname=arcname, recursive=False)
                    summary.file_count += 1
                    summary.total_size += file_path.stat().st_size
        except (OSError, tarfile.TarError) as e:
            archive_path.unlink(missing_ok=True)
            raise ArchiveError(f"Failed to create archive: {e}") from e
        
        logger.debug(
            "Archived %d files (%d bytes) into %s",
            summary.file_count, summary.total_size, archive_path
        )
        return summary
    
    def extract_archive(self, archive_path: Union[str, Path], target: Union[str, Path]) -> int:
        """
        Expand every entry of archive_path under target.
        
        Directory structure is recreated as needed. Entries with absolute
        names or names escaping target are rejected.
        
        Returns:
            Number of regular files extracted
            
        Raises:
            ArchiveError: If the archive cannot be read or an entry is unsafe
        """
        target = Path(target)
        
        try:
            with tarfile.open(archive_path, "r:gz") as tar:
                members = tar.getmembers()
                tar.extractall(path=target, members=members, filter="data")
        except (OSError, tarfile.TarError) as e:
            raise ArchiveError(f"Failed to extract archive: {e}") from e
        
        extracted = sum(1 for member in members if member.isfile())
        logger.debug("Extracted %d files from %s into %s", extracted, archive_path, target)
        return extracted
