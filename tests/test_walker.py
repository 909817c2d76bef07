"""Tests for tree walking."""

import os
from pathlib import Path

import pytest

from tree_transfer.walker import relative_posix, walk_files


class TestWalkFiles:
    """Test recursive file enumeration."""
    
    def test_yields_all_regular_files(self, music_tree):
        """Every file at every depth is yielded, directories are not."""
        found = sorted(relative_posix(path, music_tree) for path in walk_files(music_tree))
        
        assert found == [
            "artist/album/01 - intro.flac",
            "artist/album/02 - song.flac",
            "artist/cover.jpg",
            "empty.txt",
            "playlist.m3u",
        ]
    
    def test_yields_absolute_paths_under_root(self, source_tree):
        for path in walk_files(source_tree):
            assert path.is_file()
            assert source_tree in path.parents
    
    def test_empty_directories_are_skipped(self, tmp_path):
        (tmp_path / "a" / "b" / "c").mkdir(parents=True)
        
        assert list(walk_files(tmp_path)) == []
    
    def test_non_directory_root_yields_nothing(self, tmp_path):
        file_path = tmp_path / "single.txt"
        file_path.write_text("x")
        
        assert list(walk_files(file_path)) == []
        assert list(walk_files(tmp_path / "missing")) == []
    
    def test_is_lazy(self, source_tree):
        """Walking starts only when iterated."""
        walker = walk_files(source_tree)
        assert next(walker).is_file()
    
    @pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root ignores permissions")
    def test_unreadable_directory_raises(self, tmp_path):
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "secret.txt").write_text("x")
        locked.chmod(0)
        try:
            with pytest.raises(OSError):
                list(walk_files(tmp_path))
        finally:
            locked.chmod(0o755)


class TestRelativePosix:
    """Test relative path normalization."""
    
    def test_forward_slashes(self, tmp_path):
        path = tmp_path / "sub" / "dir" / "file.txt"
        
        assert relative_posix(path, tmp_path) == "sub/dir/file.txt"
    
    def test_outside_root_raises(self, tmp_path):
        with pytest.raises(ValueError):
            relative_posix(Path("/elsewhere/file.txt"), tmp_path)
