"""
Progress Display Utilities
Rich progress bar advanced once per finished item
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterator

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)


@contextmanager
def item_progress(
    total: int, enabled: bool = True, description: str = "Processing images"
) -> Iterator[Callable[[Any], None]]:
    """Show a progress bar on stderr and yield a callback that advances it.

    The callback accepts (and ignores) the finished item so it can be passed
    straight to ``BatchRunner.run``.
    """
    progress = Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(bar_width=40),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=Console(stderr=True),
        transient=True,
        disable=not enabled,
    )
    with progress:
        task = progress.add_task(description, total=total)

        def advance(_item: Any = None) -> None:
            progress.advance(task)

        yield advance
