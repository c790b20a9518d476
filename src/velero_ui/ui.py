"""
Unified UI components for Velero-UI.

Provides consistent Rich-based styling for the wizard.
"""

import sys
from typing import Optional, List, Sequence, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.rule import Rule
from rich import box


console = Console()


# Status icons - use ASCII fallbacks on Windows to avoid encoding issues
class Icons:
    """Icons for status indicators (ASCII on Windows, Unicode elsewhere)."""
    if sys.platform == "win32":
        SUCCESS = "[OK]"
        ERROR = "[X]"
        WARNING = "[!]"
        INFO = ">"
        PENDING = "[ ]"
        SELECTED = "[x]"
        BULLET = "*"
    else:
        SUCCESS = "\u2713"  # ✓
        ERROR = "\u2717"    # ✗
        WARNING = "\u26a0"  # ⚠
        INFO = "\u2192"     # →
        PENDING = "\u25cb"  # ○
        SELECTED = "\u25c9"  # ◉
        BULLET = "\u2022"   # •


# Color scheme
class Colors:
    """Consistent color scheme."""
    PRIMARY = "cyan"
    SUCCESS = "green"
    ERROR = "red"
    WARNING = "yellow"
    MUTED = "dim"
    SELECTED = "magenta"


def header(title: str, subtitle: Optional[str] = None, style: str = Colors.PRIMARY) -> Panel:
    """
    Create a header panel for the wizard.

    Args:
        title: Main title text
        subtitle: Optional description below title
        style: Border style color

    Returns:
        Rich Panel object
    """
    content = f"[bold {style}]{title}[/bold {style}]"
    if subtitle:
        content += f"\n\n{subtitle}"

    return Panel(
        content,
        border_style=style,
        padding=(1, 2),
    )


def step_header(title: str, hint: Optional[str] = None) -> Rule:
    """Create a rule introducing a wizard step."""
    text = f"[bold cyan]{title}[/bold cyan]"
    if hint:
        text += f"  [dim]{hint}[/dim]"
    return Rule(text, style="dim", align="left")


def status_line(
    message: str,
    status: str = "info",
    indent: int = 2,
) -> None:
    """
    Print a status line with appropriate icon and color.

    Args:
        message: Status message
        status: One of 'success', 'error', 'warning', 'info', 'pending'
        indent: Number of spaces to indent
    """
    icons = {
        "success": (Icons.SUCCESS, Colors.SUCCESS),
        "error": (Icons.ERROR, Colors.ERROR),
        "warning": (Icons.WARNING, Colors.WARNING),
        "info": (Icons.INFO, Colors.PRIMARY),
        "pending": (Icons.PENDING, Colors.MUTED),
    }

    icon, color = icons.get(status, (Icons.INFO, Colors.PRIMARY))
    prefix = " " * indent
    console.print(f"{prefix}[{color}]{icon}[/{color}] {message}", highlight=False)


def success(message: str, indent: int = 2) -> None:
    """Print a success status line."""
    status_line(message, "success", indent)


def error(message: str, indent: int = 2) -> None:
    """Print an error status line."""
    status_line(message, "error", indent)


def warning(message: str, indent: int = 2) -> None:
    """Print a warning status line."""
    status_line(message, "warning", indent)


def info(message: str, indent: int = 2) -> None:
    """Print an info status line."""
    status_line(message, "info", indent)


def muted(message: str, indent: int = 2) -> None:
    """Print a muted/dim message."""
    prefix = " " * indent
    console.print(f"{prefix}[dim]{message}[/dim]", highlight=False)


def selected_panel(title: str, values: Sequence[str]) -> Panel:
    """Panel listing the items selected so far."""
    if values:
        body = "\n".join(f"{Icons.BULLET} {value}" for value in values)
    else:
        body = "[dim]nothing selected[/dim]"
    return Panel(
        body,
        title=f"[bold]{title}[/bold]",
        border_style=Colors.SELECTED,
        padding=(0, 1),
    )


def summary_panel(
    title: str,
    rows: List[Tuple[str, str]],
    success: bool = True,
    note: Optional[str] = None,
) -> Panel:
    """
    Create a completion panel summarising the operation.

    Args:
        title: Panel title
        rows: List of (label, value) tuples
        success: Whether this is a success (green) or error (red) panel
        note: Optional note rendered below the table

    Returns:
        Rich Panel object
    """
    style = Colors.SUCCESS if success else Colors.ERROR

    table = Table(
        box=box.ROUNDED,
        show_header=False,
        padding=(0, 1),
    )
    table.add_column("Field", style="bold")
    table.add_column("Value", style="cyan")

    for label, value in rows:
        table.add_row(label, value)

    if note:
        table.add_row("", f"[dim]{note}[/dim]")

    return Panel(
        table,
        title=f"[bold {style}]{title}[/bold {style}]",
        border_style=style,
        padding=(1, 2),
    )
