"""Progress narration for scans and migrations.

The scanner and migrator report what they are doing through a
``ProgressReporter``. The base class is silent (used for JSON output and
tests); ``ConsoleReporter`` renders spinners and panels with rich.
"""

from __future__ import annotations

import asyncio

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.status import Status

from dep_migrate.models import Action, DeprecationVerdict, MigrationAction


def is_affirmative(answer: str) -> bool:
    """Operator answer parsing: only answers starting with y/Y accept. Empty means no."""
    return answer.strip().lower().startswith("y")


class ProgressReporter:
    """Silent reporter. Subclasses override the hooks they care about."""

    def check_started(self, dependency: str) -> None:
        pass

    def dependency_healthy(self, dependency: str) -> None:
        pass

    def dependency_deprecated(self, verdict: DeprecationVerdict) -> None:
        pass

    def dependency_failed(self, dependency: str, error: str) -> None:
        pass

    def action_recorded(self, action: MigrationAction) -> None:
        pass

    def check_finished(self, dependency: str) -> None:
        pass


class ConsoleReporter(ProgressReporter):
    """Human-readable narration with a spinner per lookup."""

    def __init__(self, console: Console | None = None, verb: str = "Checking"):
        self.console = console or Console()
        self.verb = verb
        self._status: Status | None = None

    def _stop_status(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def check_started(self, dependency: str) -> None:
        self._stop_status()
        self._status = self.console.status(f"{self.verb} {dependency}...")
        self._status.start()

    def check_finished(self, dependency: str) -> None:
        self._stop_status()

    def dependency_healthy(self, dependency: str) -> None:
        self._stop_status()
        self.console.print(f"[green]✓[/] {dependency} is healthy")

    def dependency_deprecated(self, verdict: DeprecationVerdict) -> None:
        self._stop_status()
        if verdict.alternative:
            suggestion = f"[bright_green]→ Suggested replacement: {verdict.alternative}[/]"
        else:
            suggestion = "[bright_cyan]→ No suggestion available yet.[/]"
        body = (
            f"[bright_red]⚠  {verdict.dependency} is deprecated[/]\n"
            f"[dim]{verdict.message}[/]\n"
            f"{suggestion}"
        )
        self.console.print(Panel(body, box=box.ROUNDED, border_style="red", padding=(1, 2)))

    def dependency_failed(self, dependency: str, error: str) -> None:
        self._stop_status()
        self.console.print(f"[red]✗[/] {dependency} check failed: {error}")

    def action_recorded(self, action: MigrationAction) -> None:
        self._stop_status()
        if action.action is Action.REPLACED:
            self.console.print(
                f"[bright_green]✔ Replacing {action.dependency} with {action.alternative}[/]"
            )
        elif action.action is Action.WOULD_REPLACE:
            self.console.print(
                f"[bright_cyan]\\[dry-run] Would replace {action.dependency} "
                f"with {action.alternative}[/]"
            )
        else:
            self.console.print(f"[dim]⏭ Skipped replacing {action.dependency}.[/]")

    async def confirm_replacement(self, dependency: str, alternative: str | None) -> bool:
        """Ask the operator whether to replace dependency. Default answer is no."""
        self._stop_status()
        prompt = f"[bright_cyan]Replace {dependency} with {alternative or '<none>'}? (y/N) [/]"
        answer = await asyncio.to_thread(self.console.input, prompt)
        return is_affirmative(answer)
