"""Tests for the direct-copy transport."""

import shutil
from unittest.mock import patch

import pytest

from tree_transfer.copier import COPY_STATUS, DirectCopyTransport
from tree_transfer.errors import NoFilesCopiedError, WalkError
from tree_transfer.progress import ProgressEmitter


class TestDirectCopyTransport:
    """Test file-by-file copying."""
    
    def setup_method(self):
        """Set up test fixtures."""
        self.transport = DirectCopyTransport()
        self.events = []
        self.emitter = ProgressEmitter(lambda event, payload: self.events.append(payload))
    
    def test_copies_tree_preserving_relative_paths(self, source_tree, tmp_path):
        target = tmp_path / "target"
        
        summary = self.transport.copy_tree(source_tree, target)
        
        assert summary.copied_files == 2
        assert summary.copied_size == 15
        assert summary.failures == []
        assert (target / "a.txt").read_bytes() == b"hello"
        assert (target / "sub" / "b.txt").read_bytes() == b"helloworld"
    
    def test_progress_emitted_before_each_file(self, source_tree, tmp_path):
        """Each update carries the counts accumulated before that file."""
        self.transport.copy_tree(source_tree, tmp_path / "target", self.emitter, total_files=2, total_size=15)
        
        assert len(self.events) == 2
        assert all(event.status == COPY_STATUS for event in self.events)
        assert sorted(event.current_file for event in self.events) == ["a.txt", "sub/b.txt"]
        
        first, second = self.events
        assert (first.processed_files, first.processed_size) == (0, 0)
        assert second.processed_files == 1
        assert second.processed_size in (5, 10)
        assert first.total_files == 2
        assert first.total_size == 15
    
    def test_empty_source_raises(self, tmp_path):
        source = tmp_path / "empty"
        source.mkdir()
        
        with pytest.raises(NoFilesCopiedError, match="No files were copied"):
            self.transport.copy_tree(source, tmp_path / "target")
    
    def test_failed_file_is_recorded_and_skipped(self, source_tree, tmp_path):
        original_copyfile = shutil.copyfile
        
        def flaky_copyfile(src, dst, *args, **kwargs):
            if str(src).endswith("a.txt"):
                raise PermissionError("read-only device")
            return original_copyfile(src, dst, *args, **kwargs)
        
        target = tmp_path / "target"
        with patch("tree_transfer.copier.shutil.copyfile", side_effect=flaky_copyfile):
            summary = self.transport.copy_tree(source_tree, target)
        
        assert summary.copied_files == 1
        assert summary.copied_size == 10
        assert [failure.path for failure in summary.failures] == ["a.txt"]
        assert not (target / "a.txt").exists()
    
    def test_all_files_failing_raises(self, source_tree, tmp_path):
        with patch("tree_transfer.copier.shutil.copyfile", side_effect=OSError("device gone")):
            with pytest.raises(NoFilesCopiedError):
                self.transport.copy_tree(source_tree, tmp_path / "target")
    
    def test_walk_failure_is_fatal(self, source_tree, tmp_path):
        with patch("tree_transfer.copier.walk_files", side_effect=PermissionError("no listing")):
            with pytest.raises(WalkError, match="Failed to copy files"):
                self.transport.copy_tree(source_tree, tmp_path / "target")
    
    def test_broken_sink_does_not_stop_copy(self, source_tree, tmp_path):
        def broken_sink(event, payload):
            raise RuntimeError("window closed")
        
        summary = self.transport.copy_tree(source_tree, tmp_path / "target", ProgressEmitter(broken_sink))
        
        assert summary.copied_files == 2
