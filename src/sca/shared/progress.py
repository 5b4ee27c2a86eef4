"""Rich progress display for the comparison stages."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn

console = Console()


class AnalysisProgress:
    """Tracks the stages of one comparison run using Rich.

    Each stage is marked complete when the next one starts; ``finish``
    closes the last one.
    """

    def __init__(self) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_ids: dict[str, TaskID] = {}
        self._current: str | None = None

    def __enter__(self) -> "AnalysisProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start_stage(self, stage: str) -> None:
        """Register a stage, completing the previous one."""
        if self._current is not None:
            self.finish_stage(self._current)
        tid = self._progress.add_task(f"[cyan]{stage}[/]", total=None)
        self._task_ids[stage] = tid
        self._current = stage

    def finish_stage(self, stage: str) -> None:
        if stage in self._task_ids:
            self._progress.update(
                self._task_ids[stage],
                description=f"[green]✓ {stage}[/]",
                completed=True,
            )
        if stage == self._current:
            self._current = None

    def fail_stage(self, error: str) -> None:
        """Mark the running stage as failed."""
        if self._current is None:
            return
        self._progress.update(
            self._task_ids[self._current],
            description=f"[red]✗ {self._current}: {error}[/]",
            completed=True,
        )
        self._current = None

    def finish(self) -> None:
        if self._current is not None:
            self.finish_stage(self._current)

    def print_phase(self, label: str) -> None:
        """Print a phase header outside the progress display."""
        self._progress.console.print(Panel(f"[bold]{label}[/bold]", style="blue"))
