"""File-by-file copy transport."""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from tree_transfer.errors import NoFilesCopiedError, WalkError
from tree_transfer.models import FileFailure, TransferProgress
from tree_transfer.progress import ProgressEmitter
from tree_transfer.walker import relative_posix, walk_files

logger = logging.getLogger(__name__)

COPY_STATUS = "Copying files..."


@dataclass
class CopySummary:
    """Outcome of a direct copy."""
    
    copied_files: int = 0
    copied_size: int = 0
    failures: List[FileFailure] = field(default_factory=list)


class DirectCopyTransport:
    """Copy a tree file by file, preserving relative paths."""
    
    def copy_tree(
        self,
        source: Union[str, Path],
        target: Union[str, Path],
        emitter: Optional[ProgressEmitter] = None,
        total_files: int = 0,
        total_size: int = 0
    ) -> CopySummary:
        """
        Copy every file under source to the same relative path under target.
        
        A progress update is emitted before each file is copied, carrying the
        counts accumulated so far. A file that fails to copy is recorded in
        the summary's failures and the walk continues.
        
        Args:
            source: Directory to copy from
            target: Directory to copy into
            emitter: Where to send progress updates
            total_files: Expected file count, if known
            total_size: Expected byte count, if known
            
        Returns:
            CopySummary with counts and per-file failures
            
        Raises:
            WalkError: If a source directory cannot be listed
            NoFilesCopiedError: If not a single file was copied
        """
        source = Path(source)
        target = Path(target)
        emitter = emitter or ProgressEmitter()
        summary = CopySummary()
        
        try:
            for file_path in walk_files(source):
                relative_path = relative_posix(file_path, source)
                target_file = target / relative_path
                
                emitter.emit(TransferProgress(
                    status=COPY_STATUS,
                    current_file=relative_path,
                    processed_files=summary.copied_files,
                    total_files=total_files,
                    processed_size=summary.copied_size,
                    total_size=total_size,
                ))
                
                try:
                    size = file_path.stat().st_size
                    target_file.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copyfile(file_path, target_file)
                except OSError as e:
                    logger.warning("Failed to copy %s: %s", relative_path, e)
                    summary.failures.append(FileFailure(path=relative_path, error=str(e)))
                    continue
                
                summary.copied_files += 1
                summary.copied_size += size
        except OSError as e:
            raise WalkError(f"Failed to copy files: {e}") from e
        
        if summary.copied_files == 0:
            raise NoFilesCopiedError()
        
        logger.debug(
            "Copied %d files (%d bytes), %d failed",
            summary.copied_files, summary.copied_size, len(summary.failures)
        )
        return summary
