"""
linguard UI module - Rich console output for catalog checks and CLI commands.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

BADGE = "[bold white on dark_cyan] LG [/bold white on dark_cyan]"
BORDER_COLOR = "cyan"
PANEL_WIDTH = 70


# ============================================================================
# STATUS LINES
# ============================================================================


def _status(icon: str, color: str, message: str, details: str, details_style: str, badge: bool):
    prefix = f"{BADGE} " if badge else ""
    console.print(f"{prefix}[{color}]{icon}[/{color}] {message}")
    if details:
        console.print(f"    [{details_style}]{details}[/{details_style}]")


def success(message: str, details: str = "", badge: bool = True):
    """Green ✓ line, e.g. a locale that matches the reference."""
    _status("✓", "green", message, details, "dim", badge)


def warning(message: str, details: str = "", badge: bool = True):
    """Yellow ⚠ line for non-blocking findings such as extra keys."""
    _status("⚠", "yellow", message, details, "dim", badge)


def error(message: str, details: str = "", badge: bool = True):
    """
    Red ✗ line for blocking findings and command errors.

    Args:
        message: Main line, already markup-escaped by the caller
        details: Optional hint printed indented below, in red
        badge: Prefix the LG badge
    """
    _status("✗", "red", message, details, "red", badge)


def info(message: str):
    console.print(message)


def section(title: str):
    """Header separating groups of checks."""
    console.print()
    console.print(f"[bold cyan]━━━ {title} ━━━[/bold cyan]")
    console.print()


# ============================================================================
# PANELS
# ============================================================================


def status_box(title: str, items: dict[str, str]):
    """
    Key/value panel, used for `linguard detect` and `linguard config`.

    Example:
        status_box("CONFIGURATION", {"reference_locale": "en (default)"})
    """
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="dim", no_wrap=True)
    table.add_column("Value", style="white")
    for key, value in items.items():
        table.add_row(f"{key}:", value)

    console.print(
        Panel(
            table,
            title=f"[bold]{title}[/bold]",
            border_style=BORDER_COLOR,
            padding=(1, 2),
            expand=False,
            width=PANEL_WIDTH,
        )
    )


def summary_box(title: str, items: list[str], ok: bool = True):
    """Closing panel of a catalog check; green when ok, red otherwise."""
    color = "green" if ok else "red"
    icon = "✓" if ok else "✗"

    content = f"[{color}]{icon}[/{color}] {title}\n\n"
    content += "".join(f"  • {item}\n" for item in items)
    console.print(Panel(content, border_style=color, padding=(1, 2), expand=False))


# ============================================================================
# TABLES
# ============================================================================


def data_table(columns: list[tuple[str, str]], rows: list[list[Any]], title: str | None = None):
    """
    Print a table of keys or divergences.

    Args:
        columns: (header, style) pairs
        rows: Cell values in column order
        title: Optional table title
    """
    table = Table(title=title, border_style="dim", title_style="bold", padding=(0, 1))
    for name, style in columns:
        table.add_column(name, style=style)
    for row in rows:
        table.add_row(*[str(cell) for cell in row])

    console.print()
    console.print(table)
    console.print()
