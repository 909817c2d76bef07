"""Transfer engine: manifest capture, transport and verification."""

import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import List, Optional, Tuple, Union

from tree_transfer.archive import ArchiveTransport
from tree_transfer.checksum import ChecksumCalculator
from tree_transfer.config import Config
from tree_transfer.copier import DirectCopyTransport
from tree_transfer.errors import ArchiveError, SourceNotFoundError, TransferError
from tree_transfer.locking import TargetLockRegistry, default_registry
from tree_transfer.manifest import ManifestGenerator
from tree_transfer.models import (
    FileFailure,
    TransferManifest,
    TransferOptions,
    TransferProgress,
    TransferResult,
)
from tree_transfer.progress import ProgressEmitter, ProgressSink, milestone
from tree_transfer.verifier import Verifier
from tree_transfer.walker import relative_posix, walk_files

logger = logging.getLogger(__name__)

# Milestone labels
CALCULATING_CHECKSUMS = "Calculating checksums..."
CREATING_ARCHIVE = "Creating archive..."
TRANSFERRING_ARCHIVE = "Transferring archive..."
EXTRACTING_ARCHIVE = "Extracting archive..."
TRANSFER_COMPLETE = "Transfer complete"


class TransferEngine:
    """Move a directory tree to a new location and optionally verify it."""
    
    def __init__(
        self,
        config: Optional[Config] = None,
        sink: Optional[ProgressSink] = None,
        locks: Optional[TargetLockRegistry] = None
    ):
        """Initialize the transfer engine."""
        self.config = config or Config()
        self.checksum_calculator = ChecksumCalculator(self.config.transfer.chunk_size)
        self.manifest_generator = ManifestGenerator(self.checksum_calculator)
        self.verifier = Verifier(self.checksum_calculator)
        self.archive_transport = ArchiveTransport()
        self.copy_transport = DirectCopyTransport()
        self.emitter = ProgressEmitter(sink)
        self.locks = locks or default_registry
        
        # Files skipped by the most recent operation
        self.last_failures: List[FileFailure] = []
    
    def calculate_directory_checksum(self, path: Union[str, Path]) -> TransferManifest:
        """
        Capture a manifest of every file under path.
        
        Files that cannot be read are left out of the manifest; they are
        listed in ``last_failures``.
        
        Raises:
            SourceNotFoundError: If path does not exist
            WalkError: If a directory cannot be listed
        """
        source_path = Path(path)
        if not source_path.exists():
            raise SourceNotFoundError()
        
        result = self.manifest_generator.build(source_path)
        self.last_failures = list(result.failures)
        return result.manifest
    
    def verify_transfer(self, path: Union[str, Path], manifest: TransferManifest) -> TransferResult:
        """
        Check the tree at path against a previously captured manifest.
        
        Mismatches and missing files never raise; they produce a result with
        success=False listing every discrepancy.
        
        Raises:
            TargetNotFoundError: If path does not exist
            ChecksumError: If a target file cannot be read
        """
        return self.verifier.verify(path, manifest)
    
    def transfer_files(self, options: TransferOptions) -> TransferResult:
        """
        Transfer options.source_path to options.target_path.
        
        Steps: capture a source manifest (if verification is requested),
        move the files by archive or direct copy, then verify the target
        against the manifest.
        
        Args:
            options: What to transfer and how
            
        Returns:
            TransferResult for the whole operation
            
        Raises:
            TransferError: On any structural failure (missing source,
                archive failure, nothing copied, target busy)
        """
        source_path = options.source_path
        target_path = options.target_path
        
        if not source_path.exists():
            raise SourceNotFoundError()
        
        self.last_failures = []
        
        with self.locks.hold(target_path):
            try:
                target_path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise TransferError(f"Failed to create target directory: {e}") from e
            
            # Step 1: Capture source manifest if verification is requested
            manifest = None
            if options.verify_transfer:
                self.emitter.emit(TransferProgress(status=CALCULATING_CHECKSUMS))
                manifest = self.calculate_directory_checksum(source_path)
            
            total_files = manifest.file_count if manifest else 0
            total_size = manifest.total_size if manifest else 0
            
            # Step 2: Move the files
            if options.create_archive:
                transferred_files, transferred_size = self._transfer_via_archive(
                    source_path, target_path, total_files, total_size
                )
            else:
                transferred_files, transferred_size = self._transfer_via_copy(
                    source_path, target_path, total_files, total_size
                )
            
            if manifest is None:
                total_files, total_size = transferred_files, transferred_size
            
            self.emitter.emit(milestone(TRANSFER_COMPLETE, total_files, total_size, 1.0))
            
            if self.last_failures:
                logger.warning("%d files were skipped during transfer", len(self.last_failures))
            
            # Step 3: Verify the target against the source manifest
            if manifest is not None:
                result = self.verify_transfer(target_path, manifest)
                if result.success:
                    result.transferred_files = manifest.file_count
                    result.total_size = manifest.total_size
                    if result.transferred_files == 0:
                        result.transferred_files = transferred_files
                        result.total_size = transferred_size
                return result
        
        return TransferResult(
            success=True,
            message="Transfer completed successfully",
            transferred_files=transferred_files,
            total_size=transferred_size,
        )
    
    def _transfer_via_copy(
        self,
        source_path: Path,
        target_path: Path,
        total_files: int,
        total_size: int
    ) -> Tuple[int, int]:
        """Copy files one by one. Returns (files, bytes) copied."""
        summary = self.copy_transport.copy_tree(
            source_path,
            target_path,
            emitter=self.emitter,
            total_files=total_files,
            total_size=total_size,
        )
        self.last_failures.extend(summary.failures)
        return summary.copied_files, summary.copied_size
    
    def _transfer_via_archive(
        self,
        source_path: Path,
        target_path: Path,
        total_files: int,
        total_size: int
    ) -> Tuple[int, int]:
        """
        Archive the source, copy the archive to the target and expand it there.
        
        Every intermediate artifact gets a per-invocation name and is removed
        on every exit path. Extraction happens in a staging directory under
        the target so a failed extraction leaves no partial tree behind.
        
        Returns:
            (files, bytes) placed in the archive
        """
        token = uuid.uuid4().hex
        archive_name = f"transfer-{token}.tar.gz"
        target_archive = target_path / f".{archive_name}"
        staging_dir = target_path / f".transfer-staging-{token}"
        
        self.emitter.emit(milestone(CREATING_ARCHIVE, total_files, total_size, 0.0))
        
        try:
            scratch = tempfile.TemporaryDirectory(prefix="tree-transfer-", dir=self.config.transfer.temp_dir)
        except OSError as e:
            raise ArchiveError(f"Failed to create archive: {e}") from e
        
        with scratch as temp_dir:
            archive_path = Path(temp_dir) / archive_name
            summary = self.archive_transport.create_archive(source_path, archive_path)
            
            logger.info(
                "Transferring archive %s to %s (%d files, %d bytes)",
                archive_path, target_path, summary.file_count, summary.total_size
            )
            self.emitter.emit(milestone(TRANSFERRING_ARCHIVE, total_files, total_size, 0.5))
            
            try:
                try:
                    shutil.copyfile(archive_path, target_archive)
                except OSError as e:
                    raise ArchiveError(f"Failed to transfer archive: {e}") from e
                
                self.emitter.emit(milestone(EXTRACTING_ARCHIVE, total_files, total_size, 0.75))
                
                self.archive_transport.extract_archive(target_archive, staging_dir)
                self._promote_staged_files(staging_dir, target_path)
            finally:
                target_archive.unlink(missing_ok=True)
                shutil.rmtree(staging_dir, ignore_errors=True)
        
        return summary.file_count, summary.total_size
    
    def _promote_staged_files(self, staging_dir: Path, target_path: Path) -> None:
        """Move extracted files from the staging directory into the target root."""
        try:
            for staged_file in walk_files(staging_dir):
                destination = target_path / relative_posix(staged_file, staging_dir)
                destination.parent.mkdir(parents=True, exist_ok=True)
                os.replace(staged_file, destination)
        except OSError as e:
            raise ArchiveError(f"Failed to extract archive: {e}") from e


def calculate_directory_checksum(path: Union[str, Path], config: Optional[Config] = None) -> TransferManifest:
    """Capture a manifest of the tree at path."""
    return TransferEngine(config).calculate_directory_checksum(path)


def verify_transfer(
    path: Union[str, Path],
    manifest: TransferManifest,
    config: Optional[Config] = None
) -> TransferResult:
    """Verify the tree at path against manifest."""
    return TransferEngine(config).verify_transfer(path, manifest)


def transfer_files(
    options: TransferOptions,
    sink: Optional[ProgressSink] = None,
    config: Optional[Config] = None
) -> TransferResult:
    """Run a single transfer, streaming progress to sink."""
    return TransferEngine(config, sink=sink).transfer_files(options)
