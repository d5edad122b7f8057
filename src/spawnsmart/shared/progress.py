"""Rich progress display for the content load sequence."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from spawnsmart.schemas.content import CategoryLoad

console = Console()

_STEP_LABELS = {
    "suppliers": "Suppliers",
    "products": "Products",
    "spores": "Spore varieties",
    "educational": "Educational content",
    "faqs": "FAQs",
    "facts": "Mushroom facts",
    "components": "UI copy",
}


class LoadProgress:
    """Spinner rows that follow the resolver's load steps.

    Pass :meth:`on_step` as the resolver's ``on_step`` callback.
    """

    def __init__(self, target: Console | None = None) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=target or console,
            transient=False,
        )
        self._task_ids: dict[str, int] = {}

    def __enter__(self) -> "LoadProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def on_step(self, step: str, outcome: CategoryLoad | None) -> None:
        if outcome is None:
            self.start_step(step)
        elif outcome.status == "failed":
            self.fail_step(step, outcome.error)
        else:
            self.finish_step(step, outcome)

    def start_step(self, step: str) -> None:
        label = _STEP_LABELS.get(step, step)
        tid = self._progress.add_task(f"[cyan]{label}[/]", total=None)
        self._task_ids[step] = tid

    def finish_step(self, step: str, outcome: CategoryLoad) -> None:
        if step not in self._task_ids:
            return
        label = _STEP_LABELS.get(step, step)
        if outcome.status == "fallback":
            description = f"[yellow]~ {label}: built-in ({outcome.count})[/]"
        elif outcome.status == "empty":
            description = f"[dim]- {label}: none[/]"
        else:
            description = f"[green]✓ {label} ({outcome.count})[/]"
        self._progress.update(self._task_ids[step], description=description, completed=True)

    def fail_step(self, step: str, error: str) -> None:
        if step not in self._task_ids:
            return
        label = _STEP_LABELS.get(step, step)
        self._progress.update(
            self._task_ids[step], description=f"[red]✗ {label}: {escape(error)}[/]", completed=True,
        )

    def print_phase(self, label: str) -> None:
        """Print a header panel outside the spinner rows."""
        self._progress.console.print(Panel(f"[bold]{label}[/bold]", style="blue"))
