"""Shared utility functions for the blueprint scaffolder.

Provides case-conversion helpers used by templates and the router patcher,
Rich-based console reporting, and logging setup for the CLI.
"""

from __future__ import annotations

import logging
import re

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def to_pascal_case(name: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", name)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def to_camel_case(name: str) -> str:
    """Convert ``some_thing`` to ``someThing``."""
    pascal = to_pascal_case(name)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""


def to_title_case(name: str) -> str:
    """Convert ``user_profile`` to ``User Profile``."""
    return " ".join(word.capitalize() for word in re.split(r"[-_\s]+", name) if word)


def describe_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into ``field: message; ...`` for display."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def configure_logging(level: str | int = "INFO") -> None:
    """Route stdlib logging through Rich for CLI runs.

    Library code only ever calls ``logging.getLogger(__name__)``; handlers are
    attached here, once, by the command-line entry point.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_file_list(paths: list[str], title: str) -> None:
    """Print generated paths inside a panel, one per line."""
    body = "\n".join(escape(p) for p in paths) if paths else "[dim](none)[/dim]"
    console.print(Panel(body, title=title, border_style="green"))


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")


def print_info(message: str) -> None:
    console.print(escape(message))
