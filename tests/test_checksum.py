"""Tests for checksum calculation."""

import hashlib
import shutil
import subprocess

import pytest

from tree_transfer.checksum import DEFAULT_CHUNK_SIZE, ChecksumCalculator


class TestChecksumCalculator:
    """Test checksum calculation functionality."""
    
    def setup_method(self):
        """Set up test fixtures."""
        self.calculator = ChecksumCalculator()
    
    def test_sha256_known_answer(self, tmp_path):
        """Test SHA256 calculation against a known answer."""
        fixture_path = tmp_path / "small.txt"
        fixture_path.write_bytes(b"Hello, transfer world! This is a test file for checksum validation.")
        expected_sha256 = "70edf5fc02681e68c08e1a65a70bc1ee7eb7c03107341ca7a5609ab6171fca74"
        
        actual_sha256 = self.calculator.calculate_sha256(fixture_path)
        
        assert actual_sha256 == expected_sha256
        assert len(actual_sha256) == 64
        assert all(c in "0123456789abcdef" for c in actual_sha256)
    
    def test_sha256_empty_file(self, tmp_path):
        """Test SHA256 of an empty file."""
        fixture_path = tmp_path / "empty.bin"
        fixture_path.write_bytes(b"")
        
        assert self.calculator.calculate_sha256(fixture_path) == hashlib.sha256(b"").hexdigest()
    
    def test_sha256_large_file_multi_chunk(self, tmp_path):
        """Test SHA256 calculation for file larger than chunk size (8192 bytes)."""
        large_content = b"A" * (DEFAULT_CHUNK_SIZE * 2 + 100)
        fixture_path = tmp_path / "large.bin"
        fixture_path.write_bytes(large_content)
        
        assert self.calculator.calculate_sha256(fixture_path) == hashlib.sha256(large_content).hexdigest()
    
    @pytest.mark.parametrize("file_size", [DEFAULT_CHUNK_SIZE - 1, DEFAULT_CHUNK_SIZE, DEFAULT_CHUNK_SIZE + 1])
    def test_sha256_chunk_boundaries(self, tmp_path, file_size):
        """Test SHA256 calculation for files at chunk boundaries."""
        boundary_content = b"B" * file_size
        fixture_path = tmp_path / "boundary.bin"
        fixture_path.write_bytes(boundary_content)
        
        assert self.calculator.calculate_sha256(fixture_path) == hashlib.sha256(boundary_content).hexdigest()
    
    def test_sha256_small_chunk_size(self, tmp_path):
        """Test that a custom chunk size gives the same digest."""
        content = bytes(range(256)) * 10
        fixture_path = tmp_path / "bytes.bin"
        fixture_path.write_bytes(content)
        
        calculator = ChecksumCalculator(chunk_size=7)
        assert calculator.calculate_sha256(fixture_path) == hashlib.sha256(content).hexdigest()
    
    def test_invalid_chunk_size(self):
        """Test that a non-positive chunk size is rejected."""
        with pytest.raises(ValueError):
            ChecksumCalculator(chunk_size=0)
    
    def test_missing_file_raises(self, tmp_path):
        """Test that an unreadable file raises instead of returning a digest."""
        with pytest.raises(OSError):
            self.calculator.calculate_sha256(tmp_path / "missing.bin")
    
    def test_sha256_cross_validation_with_sha256sum(self, tmp_path):
        """Test SHA256 calculation against an external command-line tool."""
        tool = shutil.which("sha256sum") or shutil.which("shasum")
        if not tool:
            pytest.skip("no sha256 command available on this system")
        
        fixture_path = tmp_path / "cross_validation.txt"
        fixture_path.write_bytes(b"Cross-validation test content for audio library integrity verification.")
        
        cmd = [tool, str(fixture_path)] if tool.endswith("sha256sum") else [tool, "-a", "256", str(fixture_path)]
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        external_sha256 = result.stdout.strip().split()[0]
        
        assert self.calculator.calculate_sha256(fixture_path) == external_sha256
    
    def test_checksum_verification(self, tmp_path):
        """Test checksum verification functionality."""
        fixture_path = tmp_path / "verify.txt"
        fixture_path.write_bytes(b"Test content for verification")
        checksum = self.calculator.calculate_sha256(fixture_path)
        
        assert self.calculator.verify_checksum(fixture_path, checksum) is True
        assert self.calculator.verify_checksum(fixture_path, checksum.upper()) is True
        assert self.calculator.verify_checksum(fixture_path, "0" * 64) is False
