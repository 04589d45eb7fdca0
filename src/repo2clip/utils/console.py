"""Themed diagnostic console.

Progress, warnings and the run summary go to stderr through this console.
The artifact itself never does.
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from ..core.models import ExtensionStats
from .units import format_size


class StatusType(Enum):
    """Standard status types with associated symbols."""
    SUCCESS = ("[✓]", "success")
    ERROR = ("[x]", "error")
    WARNING = ("[!]", "warning")
    INFO = ("[i]", "info")


@dataclass
class ThemeColors:
    """Color definitions for a theme."""
    info: str
    warning: str
    error: str
    success: str
    highlight: str
    path: str
    number: str
    dim: str


THEMES = {
    'manhattan': ThemeColors(
        info='cyan', warning='yellow', error='red', success='green',
        highlight='bright_cyan', path='white', number='bright_blue', dim='bright_black',
    ),
    'green': ThemeColors(
        info='green', warning='yellow', error='red', success='bright_green',
        highlight='bold green', path='bright_green', number='green', dim='green',
    ),
    'sunset': ThemeColors(
        info='orange3', warning='yellow', error='red3', success='green',
        highlight='bold orange1', path='wheat1', number='orange1', dim='grey50',
    ),
}


class ConsoleManager:
    """Rich console on stderr with theme support."""

    def __init__(self, theme: str = "manhattan", file: Optional[Any] = None, quiet: bool = False):
        """
        Args:
            theme: Theme name from THEMES
            file: Output stream (defaults to sys.stderr)
            quiet: Suppress everything except errors
        """
        self.theme_name = theme
        self.theme_colors = THEMES.get(theme, THEMES['manhattan'])
        self.quiet = quiet
        self.console = Console(
            theme=self._create_rich_theme(),
            file=file or sys.stderr,
            highlight=False,
            no_color=bool(os.environ.get('NO_COLOR')),
        )

    @property
    def is_interactive(self) -> bool:
        return self.console.is_terminal and not self.quiet

    def _create_rich_theme(self) -> Theme:
        colors: Dict[str, str] = vars(self.theme_colors)
        return Theme(dict(colors))

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, **kwargs)

    def print_status(self, status: StatusType, message: str):
        """Print a status line with icon."""
        if self.quiet and status is not StatusType.ERROR:
            return
        icon, style = status.value
        text = Text()
        text.append(f"{icon} ", style=style)
        text.append(message)
        self.console.print(text)

    def print_error(self, message: str):
        self.print_status(StatusType.ERROR, message)

    def print_success(self, message: str):
        self.print_status(StatusType.SUCCESS, message)

    def print_info(self, message: str):
        self.print_status(StatusType.INFO, message)

    def print_warning(self, message: str):
        self.print_status(StatusType.WARNING, message)

    def print_summary(self, total_files: int, total_bytes: int, total_tokens: int,
                      breakdown: Dict[str, ExtensionStats], skipped: int = 0):
        """Print the run summary with a per-extension table."""
        if self.quiet:
            return

        table = Table(title="Files by extension", title_style="highlight", header_style="info")
        table.add_column("Extension", style="path")
        table.add_column("Files", justify="right", style="number")
        table.add_column("Size", justify="right", style="number")
        table.add_column("Tokens", justify="right", style="number")
        for extension, stats in breakdown.items():
            label = f".{extension}" if extension else "(none)"
            table.add_row(label, str(stats.files), format_size(stats.bytes), f"{stats.tokens:,}")
        self.console.print(table)

        self.console.print(f"[info]FILES PROCESSED:[/info] [number]{total_files}[/number]")
        self.console.print(f"[info]TOTAL SIZE:[/info] [number]{format_size(total_bytes)}[/number]")
        self.console.print(f"[info]ESTIMATED TOKENS:[/info] [number]{total_tokens:,}[/number]")
        if skipped:
            self.console.print(f"[info]SKIPPED:[/info] [number]{skipped}[/number]")

    def print_exception(self):
        self.console.print_exception()
