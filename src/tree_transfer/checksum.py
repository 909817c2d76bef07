"""Streaming SHA-256 checksums for individual files."""

import hashlib
from pathlib import Path
from typing import Union

DEFAULT_CHUNK_SIZE = 8192


class ChecksumCalculator:
    """Calculate file checksums by reading in fixed-size chunks."""
    
    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize the calculator with the read chunk size in bytes."""
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
    
    def calculate_sha256(self, file_path: Union[str, Path]) -> str:
        """
        Calculate the SHA-256 digest of a file.
        
        The file is never loaded into memory as a whole, so large audio
        files are fine.
        
        Args:
            file_path: Path to the file
            
        Returns:
            Lowercase hex digest (64 characters)
            
        Raises:
            OSError: If the file cannot be opened or read
        """
        sha256_hash = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(self.chunk_size), b""):
                sha256_hash.update(chunk)
        return sha256_hash.hexdigest()
    
    def verify_checksum(self, file_path: Union[str, Path], expected_checksum: str) -> bool:
        """Check whether a file's SHA-256 matches the expected digest."""
        return self.calculate_sha256(file_path) == expected_checksum.lower()
