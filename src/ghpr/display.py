"""
Rich display layer for ghpr.

Everything meant for a human goes to stderr through ``console``; stdout is
reserved for machine-readable output such as the created pull request URL.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text
from rich.theme import Theme

# ── Theme ──────────────────────────────────────────────────

GHPR_THEME = Theme({
    "ghpr.error": "bold red",
    "ghpr.muted": "dim white",
})

console = Console(theme=GHPR_THEME, stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure rich-powered logging for the entire application."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                tracebacks_show_locals=verbose,
                show_path=verbose,
                markup=False,
            )
        ],
        force=True,
    )


def pluralize(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


# ── Status lines ───────────────────────────────────────────


def print_line(message: str = "") -> None:
    """Print an unstyled status line to stderr, never wrapped or highlighted."""
    console.print(Text(message), soft_wrap=True, highlight=False)


def print_warning(message: str) -> None:
    print_line(f"Warning: {message}")


def print_creating(head_ref: str, base_ref: str, base_repo: str) -> None:
    """Announce the pull request about to be created."""
    print_line()
    print_line(f"Creating pull request for {head_ref} into {base_ref} in {base_repo}")
    print_line()


def print_opening(display_url: str) -> None:
    print_line(f"Opening {display_url} in your browser.")


# ── Error display ──────────────────────────────────────────


def print_error(message: str, detail: str = "") -> None:
    """Print an error. The message itself is never wrapped; the detail goes in a panel."""
    err = Text()
    err.append("ERROR: ", style="ghpr.error")
    err.append(message)
    console.print(err, soft_wrap=True, highlight=False)
    if detail:
        console.print(Panel(Text(detail, style="ghpr.muted"), border_style="red"))
