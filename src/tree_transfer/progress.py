"""Best-effort progress reporting for transfers."""

import logging
from typing import Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn

from tree_transfer.models import TransferProgress

logger = logging.getLogger(__name__)

TRANSFER_PROGRESS_EVENT = "transfer-progress"


class ProgressSink(Protocol):
    """Receiver of progress events."""
    
    def __call__(self, event: str, payload: TransferProgress) -> None:
        ...


class ProgressEmitter:
    """
    Push progress updates to a sink without letting it affect the transfer.
    
    The sink may be missing or may raise; either way the update is dropped
    and the transfer carries on.
    """
    
    def __init__(self, sink: Optional[ProgressSink] = None):
        self.sink = sink
    
    def emit(self, progress: TransferProgress) -> None:
        """Deliver a progress update on the transfer-progress event."""
        if self.sink is None:
            return
        try:
            self.sink(TRANSFER_PROGRESS_EVENT, progress)
        except Exception as e:
            logger.warning("Dropped progress update %r: %s", progress.status, e)


def milestone(status: str, total_files: int, total_size: int, fraction: float) -> TransferProgress:
    """
    Build a coarse progress update for phases that are opaque to the engine.
    
    Processed counts are the totals scaled by fraction, not measured I/O.
    """
    numerator, denominator = fraction.as_integer_ratio()
    return TransferProgress(
        status=status,
        current_file=None,
        processed_files=total_files * numerator // denominator,
        total_files=total_files,
        processed_size=total_size * numerator // denominator,
        total_size=total_size,
    )


class RichProgressSink:
    """Render transfer-progress events as a rich progress bar."""
    
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total} files"),
            console=self.console,
            transient=True,
        )
        self._task: Optional[TaskID] = None
    
    def __enter__(self) -> "RichProgressSink":
        self._progress.start()
        self._task = self._progress.add_task("Starting...", total=None)
        return self
    
    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self._progress.stop()
    
    def __call__(self, event: str, payload: TransferProgress) -> None:
        if event != TRANSFER_PROGRESS_EVENT or self._task is None:
            return
        
        description = escape(payload.status)
        if payload.current_file:
            description = f"{description} {escape(payload.current_file)}"
        
        self._progress.update(
            self._task,
            description=description,
            completed=payload.processed_files,
            total=payload.total_files or None,
        )
