"""Help screen describing the menu actions and flags."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Center, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static

HELP_SECTIONS: list[tuple[str, list[tuple[str, str]]]] = [
    (
        "Actions",
        [
            ("scan", "List deprecated dependencies and suggested replacements"),
            ("migrate", "Replace deprecated dependencies and reinstall"),
        ],
    ),
    (
        "Available Flags",
        [
            ("--interactive", "Ask before replacing each package"),
            ("--dry-run", "Show changes without applying them"),
            ("--json", "Output results as JSON"),
            ("--refresh-cache", "Force re-fetch package info"),
        ],
    ),
    (
        "Keys",
        [
            ("↑/↓", "Move between actions"),
            ("Enter", "Run the highlighted action"),
            ("Space", "Toggle the focused flag"),
            ("Tab", "Move focus between actions and flags"),
        ],
    ),
]


class HelpScreen(ModalScreen[None]):
    """Modal screen with usage help."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close", priority=True),
        Binding("h", "dismiss", "Close"),
        Binding("question_mark", "dismiss", "Close"),
    ]

    CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-container {
        width: 72;
        height: auto;
        max-height: 85%;
        background: $surface;
        border: thick $success;
        padding: 1 2;
    }

    #help-scroll {
        height: auto;
        max-height: 100%;
    }

    #help-title {
        text-align: center;
        text-style: bold;
        color: $success;
        padding-bottom: 1;
    }

    .section-title {
        text-style: bold;
        color: $secondary;
        padding-top: 1;
    }

    .help-row {
        padding-left: 2;
    }

    #help-footer {
        text-align: center;
        color: $text-muted;
        padding-top: 1;
    }
    """

    def __init__(self, sections: list[tuple[str, list[tuple[str, str]]]] | None = None) -> None:
        super().__init__()
        self._sections = sections if sections is not None else HELP_SECTIONS

    def compose(self) -> ComposeResult:
        with Center():
            with Vertical(id="help-container"):
                yield Static("Help & Docs", id="help-title")

                with VerticalScroll(id="help-scroll"):
                    for section_name, rows in self._sections:
                        yield Static(f"[bold]{section_name}[/]", classes="section-title")
                        for name, desc in rows:
                            yield Static(f"  [bold yellow]{name:16}[/] {desc}", classes="help-row")

                yield Static("Press [bold]?[/], [bold]H[/], or [bold]Esc[/] to close", id="help-footer")
