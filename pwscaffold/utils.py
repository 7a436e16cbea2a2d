"""Shared console helpers for the Playwright scaffold generator.

Provides the Rich console used for all user-facing output, the coloured
message helpers, duration formatting, and the step progress reporters that
the scaffold orchestrator drives.
"""

from __future__ import annotations

from rich.console import Console
from rich.status import Status
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
        format_duration(3661.0) -> "1h 1m 1s"
    """
    if seconds < 0:
        return "0.0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = seconds % 60

    parts: list[str] = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")

    if hours > 0 or minutes > 0:
        parts.append(f"{int(secs)}s")
    else:
        parts.append(f"{secs:.1f}s")

    return " ".join(parts)


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Option", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


# ---------------------------------------------------------------------------
# Step progress reporting
# ---------------------------------------------------------------------------


class StepReporter:
    """Progress sink for labelled scaffold steps.

    The base class records events and prints nothing, which makes it the
    reporter of choice in tests.  ``events`` holds ``(state, label)`` tuples
    where *state* is ``"start"``, ``"succeed"`` or ``"fail"``.
    """

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def start(self, label: str) -> None:
        self.events.append(("start", label))

    def succeed(self, label: str) -> None:
        self.events.append(("succeed", label))

    def fail(self, label: str) -> None:
        self.events.append(("fail", label))

    @property
    def failed_label(self) -> str | None:
        """Label of the last failed step, if any."""
        for state, label in reversed(self.events):
            if state == "fail":
                return label
        return None


class ConsoleStepReporter(StepReporter):
    """Reports steps on the Rich console with a spinner per running step."""

    def __init__(self) -> None:
        super().__init__()
        self._status: Status | None = None

    def start(self, label: str) -> None:
        super().start(label)
        self._stop_spinner()
        self._status = console.status(f"[cyan]{label}[/cyan]", spinner="dots")
        self._status.start()

    def succeed(self, label: str) -> None:
        super().succeed(label)
        self._stop_spinner()
        console.print(f"  [green]✔[/green] {label}")

    def fail(self, label: str) -> None:
        super().fail(label)
        self._stop_spinner()
        console.print(f"  [red]✖[/red] {label}")

    def _stop_spinner(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None
