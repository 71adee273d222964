"""Progress display utilities"""

from contextlib import contextmanager
from typing import Generator

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn


class ProgressManager:
    """Centralized progress management"""

    def __init__(self, console: Console = None):
        self.console = console or Console()

    @contextmanager
    def basic_progress(self, description: str = "Processing...") -> Generator[Progress, None, None]:
        """Simple spinner progress"""
        with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self.console,
                transient=True,
        ) as progress:
            progress.add_task(description)
            yield progress
