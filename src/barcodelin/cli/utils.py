"""
Shared CLI utilities for barcodelin commands.

Provides console, progress and logging helpers used across CLI modules.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from barcodelin.models.results import SampleResult


@contextmanager
def spinner_progress(
    description: str,
    console: Console | None = None,
    quiet: bool = False,
) -> Generator[Progress, None, None]:
    """Context manager for spinner-style progress display.

    Creates a standardized spinner progress bar used throughout the CLI.
    The spinner is suppressed when quiet mode is enabled.

    Args:
        description: Task description to display.
        console: Rich Console instance. If None and not quiet, creates one.
        quiet: If True, suppress the progress display entirely.

    Yields:
        Progress instance (even when quiet, for API consistency).

    Example:
        >>> with spinner_progress("Loading barcodes...", console, quiet) as progress:
        ...     # Perform work
        ...     pass
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        disable=quiet,
    ) as progress:
        progress.add_task(description=description, total=None)
        yield progress


def configure_logging(verbose: bool, console: Console | None = None) -> None:
    """Route library log records through rich when verbose output is requested."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


class ProgressObserver:
    """Sample observer that drives a rich progress bar.

    Example:
        >>> with Progress() as progress:
        ...     task = progress.add_task("Typing samples", total=len(samples))
        ...     observer = ProgressObserver(progress, task)
    """

    def __init__(self, progress: Progress, task_id: TaskID) -> None:
        self._progress = progress
        self._task_id = task_id

    def on_sample_start(self, sample: str) -> None:
        self._progress.update(self._task_id, description=f"Typing {sample}")

    def on_sample_end(self, result: SampleResult) -> None:
        self._progress.advance(self._task_id)


class QuietConsole:
    """Console wrapper that suppresses output in quiet mode.

    This class wraps a Rich Console instance and conditionally suppresses
    print output when quiet mode is enabled. All other console methods
    are delegated to the wrapped instance.

    Example:
        >>> console = Console()
        >>> qc = QuietConsole(console, quiet=True)
        >>> qc.print("This won't be shown")  # Suppressed
    """

    def __init__(self, console: Console, quiet: bool = False):
        """Initialize QuietConsole wrapper.

        Args:
            console: Rich Console instance to wrap.
            quiet: If True, suppress print output.
        """
        self._console = console
        self._quiet = quiet

    @property
    def console(self) -> Console:
        """Access the underlying Rich Console instance.

        Use this when you need to print regardless of quiet mode,
        such as for error messages.
        """
        return self._console

    @property
    def quiet(self) -> bool:
        return self._quiet

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to console unless quiet mode is enabled."""
        if not self._quiet:
            self._console.print(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        """Delegate attribute access to wrapped console."""
        return getattr(self._console, name)
