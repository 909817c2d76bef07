"""Verification of a target tree against a captured manifest."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from tree_transfer.checksum import ChecksumCalculator
from tree_transfer.errors import ChecksumError, TargetNotFoundError
from tree_transfer.models import TransferManifest, TransferResult

logger = logging.getLogger(__name__)


@dataclass
class VerificationReport:
    """Per-entry outcome of comparing a target tree to a manifest."""
    
    verified_files: int = 0
    verified_size: int = 0
    missing: List[str] = field(default_factory=list)
    mismatched: List[str] = field(default_factory=list)
    discrepancies: List[str] = field(default_factory=list)
    
    @property
    def success(self) -> bool:
        return not self.missing and not self.mismatched
    
    def to_result(self) -> TransferResult:
        if self.success:
            message = f"Successfully verified {self.verified_files} files"
        else:
            message = "Transfer verification failed:\n" + "\n".join(self.discrepancies)
        
        return TransferResult(
            success=self.success,
            message=message,
            transferred_files=self.verified_files,
            total_size=self.verified_size,
        )


class Verifier:
    """Recompute checksums under a target root and diff them against a manifest."""
    
    def __init__(self, checksum_calculator: Optional[ChecksumCalculator] = None):
        self.checksum_calculator = checksum_calculator or ChecksumCalculator()
    
    def inspect(self, target: Union[str, Path], manifest: TransferManifest) -> VerificationReport:
        """
        Check every manifest entry against the target tree.
        
        Read-only: the target is never modified.
        
        Raises:
            TargetNotFoundError: If target does not exist
            ChecksumError: If a present target file cannot be read
        """
        target = Path(target)
        if not target.exists():
            raise TargetNotFoundError()
        
        report = VerificationReport()
        for entry in manifest.checksums:
            target_file = target / entry.path
            if not target_file.exists():
                report.missing.append(entry.path)
                report.discrepancies.append(f"Missing file: {entry.path}")
                continue
            
            try:
                actual = self.checksum_calculator.calculate_sha256(target_file)
                size = target_file.stat().st_size
            except OSError as e:
                raise ChecksumError(f"Failed to calculate checksum: {e}") from e
            
            if actual != entry.checksum:
                report.mismatched.append(entry.path)
                report.discrepancies.append(f"Checksum mismatch for: {entry.path}")
            else:
                report.verified_files += 1
                report.verified_size += size
        
        if not report.success:
            logger.warning(
                "Verification of %s found %d missing and %d mismatched files",
                target, len(report.missing), len(report.mismatched)
            )
        return report
    
    def verify(self, target: Union[str, Path], manifest: TransferManifest) -> TransferResult:
        """Verify target against manifest and summarize as a TransferResult."""
        return self.inspect(target, manifest).to_result()
