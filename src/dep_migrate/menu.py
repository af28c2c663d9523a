"""Interactive menu front-end.

Lets the operator pick an action and toggle flags, then exits returning the
selection. The chosen action runs after the menu closes so its output lands
in the normal terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Checkbox, Footer, OptionList, Static
from textual.widgets.option_list import Option

from dep_migrate.help_panel import HelpScreen

BANNER = (
    "╔══════════════════════════════════╗\n"
    "║      Dep Migrate CLI Tool        ║\n"
    "╚══════════════════════════════════╝"
)

ACTIONS: list[tuple[str, str]] = [
    ("scan", "1) Scan for deprecated packages (with flags)"),
    ("migrate", "2) Migrate deprecated packages (with flags)"),
    ("help", "3) Help & Docs"),
    ("exit", "Exit"),
]

FLAGS: list[tuple[str, str]] = [
    ("interactive", "--interactive (ask before replacing)"),
    ("dry_run", "--dry-run (simulate without changes)"),
    ("json_output", "--json (output in JSON)"),
    ("refresh", "--refresh-cache (force re-fetch)"),
]


@dataclass
class MenuSelection:
    """Action and flags chosen in the menu."""

    action: str
    interactive: bool = False
    dry_run: bool = False
    json_output: bool = False
    refresh: bool = False


class MenuApp(App[MenuSelection | None]):
    """Action menu. Returns a MenuSelection, or None when the operator exits."""

    TITLE = "dep-migrate"

    BINDINGS: ClassVar[list[Binding | tuple[str, str, str]]] = [
        Binding("q", "quit_menu", "Exit"),
        Binding("escape", "quit_menu", "Exit", show=False),
        Binding("question_mark", "help", "Help"),
    ]

    CSS = """
    Screen {
        align: center middle;
    }

    #menu-container {
        width: 64;
        height: auto;
        padding: 1 2;
        border: round $primary;
    }

    #banner {
        color: $accent;
        text-style: bold;
        content-align: center middle;
    }

    #welcome {
        color: $text-muted;
        padding: 1 0;
    }

    #actions {
        height: auto;
        margin-bottom: 1;
    }

    .section-header {
        text-style: bold;
        color: $primary;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="menu-container"):
            yield Static(BANNER, id="banner")
            yield Static(
                "Welcome to dep-migrate!\nA migration assistant for deprecated npm packages.",
                id="welcome",
            )
            yield Static("Select an action:", classes="section-header")
            yield OptionList(*[Option(label, id=value) for value, label in ACTIONS], id="actions")
            yield Static("Select flags to use:", classes="section-header")
            for name, label in FLAGS:
                yield Checkbox(label, id=f"flag-{name}")
        yield Footer()

    def selected_flags(self) -> dict[str, bool]:
        """Current state of the flag checkboxes."""
        return {name: self.query_one(f"#flag-{name}", Checkbox).value for name, _ in FLAGS}

    def select_action(self, action: str) -> None:
        """Handle a chosen action."""
        if action == "help":
            self.push_screen(HelpScreen())
        elif action == "exit":
            self.exit(None)
        else:
            self.exit(MenuSelection(action=action, **self.selected_flags()))

    @on(OptionList.OptionSelected, "#actions")
    def on_action_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id:
            self.select_action(event.option.id)

    def action_help(self) -> None:
        self.push_screen(HelpScreen())

    def action_quit_menu(self) -> None:
        self.exit(None)


def run_menu() -> MenuSelection | None:
    """Show the menu and return the operator's choice."""
    return MenuApp().run()
