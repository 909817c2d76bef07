"""Exclusive locks keyed by transfer target."""

import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Set, Union

from tree_transfer.errors import TransferInProgressError


def normalize_target(target: Union[str, Path]) -> str:
    """Normalize a target path so equivalent spellings share one lock."""
    return os.path.normcase(str(Path(target).expanduser().resolve()))


class TargetLockRegistry:
    """Track which targets currently have a transfer running."""
    
    def __init__(self):
        self._lock = threading.Lock()
        self._active: Set[str] = set()
    
    def is_locked(self, target: Union[str, Path]) -> bool:
        with self._lock:
            return normalize_target(target) in self._active
    
    @contextmanager
    def hold(self, target: Union[str, Path]) -> Iterator[str]:
        """
        Hold the lock for target for the duration of the block.
        
        Raises:
            TransferInProgressError: If target is already held
        """
        key = normalize_target(target)
        with self._lock:
            if key in self._active:
                raise TransferInProgressError(f"A transfer to {target} is already in progress")
            self._active.add(key)
        try:
            yield key
        finally:
            with self._lock:
                self._active.discard(key)


# Shared by every engine in the process unless one is given its own
default_registry = TargetLockRegistry()
