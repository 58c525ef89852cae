"""Human formatter — Rich terminal output."""
from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.text import Text

from tracels.trace import PLACEHOLDER, SIZE_ERROR, printable

# ── Module state ──────────────────────────────────────────────────────

console = Console()
err_console = Console(stderr=True)

START_FORMAT = "%b %d %H:%M"


def init(force_color: bool = False):
    global console, err_console
    if force_color:
        console = Console(force_terminal=True)
    else:
        console = Console()
    err_console = Console(stderr=True)


def print_error(message: str) -> None:
    err_console.print(f"[red]{escape(message)}[/]", soft_wrap=True)


# ── Listing formatters ────────────────────────────────────────────────

def format_ls(data: list[dict]) -> None:
    """Names on one line, separated by single spaces."""
    console.print(Text(" ".join(printable(t["name"]) for t in data)), soft_wrap=True)


def _start_text(t: dict) -> str:
    start = t.get("start")
    return start.strftime(START_FORMAT) if start else PLACEHOLDER


def format_ls_long(data: list[dict]) -> None:
    names = [printable(t["name"]) for t in data]
    width = max((len(n) for n in names), default=0)
    for name, t in zip(names, data):
        duration = t.get("duration")
        size = t.get("size", SIZE_ERROR)
        row = Text()
        row.append(name.ljust(width), style="bold cyan")
        row.append(" ")
        row.append(_start_text(t), style="green")
        row.append(" ")
        row.append(PLACEHOLDER if duration is None else str(duration))
        row.append(" ")
        row.append(size, style="red" if size == SIZE_ERROR else "magenta")
        row.append(" ")
        row.append(printable(t.get("command_line", PLACEHOLDER)), style="dim")
        console.print(row, soft_wrap=True)
