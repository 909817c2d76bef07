"""Tree Transfer - Directory transfer with checksum verification."""

__version__ = "0.1.0"

from tree_transfer.config import Config
from tree_transfer.models import (
    FileChecksum,
    TransferManifest,
    TransferOptions,
    TransferProgress,
    TransferResult,
)
from tree_transfer.transfer_engine import (
    TransferEngine,
    calculate_directory_checksum,
    transfer_files,
    verify_transfer,
)

__all__ = [
    "Config",
    "FileChecksum",
    "TransferEngine",
    "TransferManifest",
    "TransferOptions",
    "TransferProgress",
    "TransferResult",
    "calculate_directory_checksum",
    "transfer_files",
    "verify_transfer",
    "__version__",
]
