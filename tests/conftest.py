"""Shared fixtures for transfer engine tests."""

from pathlib import Path

import pytest


def make_tree(root: Path, files: dict) -> Path:
    """Create files (relative path -> bytes) under root."""
    for relative_path, content in files.items():
        file_path = root / relative_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
    return root


@pytest.fixture
def source_tree(tmp_path):
    """Source tree {a.txt (5 bytes), sub/b.txt (10 bytes)}."""
    return make_tree(tmp_path / "source", {
        "a.txt": b"hello",
        "sub/b.txt": b"helloworld",
    })


@pytest.fixture
def music_tree(tmp_path):
    """A deeper tree with a file larger than one checksum chunk."""
    return make_tree(tmp_path / "music", {
        "artist/album/01 - intro.flac": b"F" * 20000,
        "artist/album/02 - song.flac": b"S" * 8192,
        "artist/cover.jpg": b"\xff\xd8\xff\xe0" + b"\x00" * 100,
        "playlist.m3u": b"artist/album/01 - intro.flac\n",
        "empty.txt": b"",
    })
