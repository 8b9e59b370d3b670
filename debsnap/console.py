"""
Console output helpers: Nord theme, banner, status messages and summary table.

Every message printed through these helpers is also written to the
transcript logger so the run log holds the same text the user saw.
"""

import logging
from typing import Iterable, Optional

import pyfiglet
from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from debsnap import APP_NAME, VERSION


# ----------------------------------------------------------------
# Nord-Themed Colors and Theme Setup
# ----------------------------------------------------------------
class NordColors:
    POLAR_NIGHT_1: str = "#2E3440"
    POLAR_NIGHT_3: str = "#434C5E"
    SNOW_STORM_1: str = "#D8DEE9"
    SNOW_STORM_2: str = "#E5E9F0"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    FROST_4: str = "#5E81AC"
    RED: str = "#BF616A"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"


nord_theme = Theme(
    {
        "banner": f"bold {NordColors.FROST_2}",
        "header": f"bold {NordColors.FROST_2}",
        "info": NordColors.GREEN,
        "warning": NordColors.YELLOW,
        "error": NordColors.RED,
        "debug": NordColors.POLAR_NIGHT_3,
        "success": NordColors.GREEN,
    }
)

console = Console(theme=nord_theme)

TRANSCRIPT_LOGGER = "debsnap.transcript"

# Silent until setup_logger attaches the run log.
logging.getLogger(TRANSCRIPT_LOGGER).addHandler(logging.NullHandler())
logging.getLogger(TRANSCRIPT_LOGGER).propagate = False


def transcript() -> logging.Logger:
    return logging.getLogger(TRANSCRIPT_LOGGER)


# ----------------------------------------------------------------
# UI Helper: Pyfiglet Banner
# ----------------------------------------------------------------
def create_header(title: str) -> Panel:
    """
    Build an ASCII art banner for the given title.

    The banner is assembled line by line into a Rich Text object so figlet
    output never gets interpreted as markup.
    """
    ascii_art = ""
    for font in ("slant", "small", "mini"):
        try:
            ascii_art = pyfiglet.Figlet(font=font, width=80).renderText(title)
        except pyfiglet.FontNotFound:
            continue
        if ascii_art.strip():
            break
    ascii_lines = [line for line in ascii_art.splitlines() if line.strip()]
    colors = [
        NordColors.FROST_1,
        NordColors.FROST_2,
        NordColors.FROST_3,
        NordColors.FROST_4,
    ]
    combined_text = Text()
    for i, line in enumerate(ascii_lines):
        combined_text.append(line, style=f"bold {colors[i % len(colors)]}")
        if i < len(ascii_lines) - 1:
            combined_text.append("\n")
    return Panel(
        Align.center(combined_text),
        border_style=NordColors.FROST_1,
        padding=(1, 2),
        title=Text(f"{APP_NAME} v{VERSION}", style=f"bold {NordColors.SNOW_STORM_2}"),
        title_align="right",
    )


# ----------------------------------------------------------------
# Simple Message Printing Helpers
# ----------------------------------------------------------------
def print_message(
    text: str,
    style: str = NordColors.FROST_2,
    prefix: str = "•",
    level: int = logging.INFO,
) -> None:
    console.print(f"[{style}]{prefix} {escape(text)}[/{style}]", highlight=False)
    transcript().log(level, f"{prefix} {text}")


def print_success(message: str) -> None:
    print_message(message, NordColors.GREEN, "✓")


def print_warning(message: str) -> None:
    print_message(message, NordColors.YELLOW, "⚠", logging.WARNING)


def print_error(message: str) -> None:
    print_message(message, NordColors.RED, "✗", logging.ERROR)


def print_step(message: str) -> None:
    print_message(message, NordColors.FROST_2, "→")


def print_section(title: str) -> None:
    border = "─" * 60
    console.print(f"\n[header]{escape(title)}[/header]")
    console.print(f"[{NordColors.FROST_3}]{border}[/{NordColors.FROST_3}]")
    transcript().info(f"--- {title} ---")


def print_summary(rows: Iterable, title: Optional[str] = None) -> None:
    """Render step outcomes as a table and record them in the transcript."""
    table = Table(title=title or "Run Summary", style="banner")
    table.add_column("Step", style="header")
    table.add_column("Status", style="info")
    table.add_column("Message", style="info")
    status_colors = {
        "done": "success",
        "planned": "debug",
        "skipped": "warning",
        "failed": "error",
    }
    for outcome in rows:
        status = outcome.status.value
        color = status_colors.get(status, "info")
        table.add_row(
            Text(outcome.name),
            f"[{color}]{status.upper()}[/{color}]",
            Text(outcome.message),
        )
        transcript().info(f"{outcome.name}: {status.upper()} {outcome.message}".rstrip())
    console.print(Panel(table, border_style=NordColors.FROST_3))
