"""Recursive enumeration of regular files under a directory root."""

from pathlib import Path
from typing import Iterator, Union


def walk_files(root: Union[str, Path]) -> Iterator[Path]:
    """
    Yield every regular file reachable from root by recursive descent.
    
    Directories themselves are not yielded and the order is whatever the
    filesystem enumeration returns. A root that is not a directory yields
    nothing.
    
    Raises:
        OSError: If a directory cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        return
    
    for entry in root.iterdir():
        if entry.is_dir():
            yield from walk_files(entry)
        elif entry.is_file():
            yield entry


def relative_posix(path: Path, root: Path) -> str:
    """Return path relative to root with forward-slash separators."""
    return Path(path).relative_to(root).as_posix()
