"""Compare page helpers for opening a pull request in the browser."""

from __future__ import annotations

import logging
from urllib.parse import quote

import typer

logger = logging.getLogger("ghpr.web")


def compare_path(host: str, base_repo: str, base_ref: str, head_ref: str) -> str:
    """``host/owner/repo/compare/base...head``, without scheme or query."""
    return f"{host}/{base_repo}/compare/{quote(base_ref, safe='/')}...{quote(head_ref, safe='/:')}"


def compare_url(host: str, base_repo: str, base_ref: str, head_ref: str) -> str:
    """Full compare URL that expands the new pull request form."""
    return f"https://{compare_path(host, base_repo, base_ref, head_ref)}?expand=1"


def open_in_browser(url: str) -> None:
    logger.debug("Launching browser for %s", url)
    typer.launch(url)
