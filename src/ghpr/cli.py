"""CLI entry point for ghpr."""

from __future__ import annotations

from pathlib import Path

import typer

from ghpr.config import GhprConfig
from ghpr.display import (
    pluralize,
    print_creating,
    print_error,
    print_opening,
    print_warning,
    setup_logging,
)
from ghpr.errors import ConfigError, GhprError, GitError
from ghpr.integrations.github_client import GitHubClient
from ghpr.orchestrator import Orchestrator

app = typer.Typer(
    name="ghpr",
    help="Work with GitHub pull requests from the command line.",
    no_args_is_help=True,
)

pr_app = typer.Typer(help="Create pull requests.", no_args_is_help=True)
app.add_typer(pr_app, name="pr")


def _find_repo_root(start: Path) -> Path | None:
    """Find git repo root from start path."""
    p = start.resolve()
    for _ in range(20):
        if (p / ".git").exists():
            return p
        parent = p.parent
        if parent == p:
            break
        p = parent
    return None


# ── pr create ──────────────────────────────────────────────


@pr_app.command("create")
def create(
    title: str = typer.Option(None, "--title", "-t", help="Pull request title"),
    body: str = typer.Option("", "--body", "-b", help="Pull request body"),
    base: str = typer.Option(
        None, "--base", "-B", help="Branch to merge into (default: base repository default branch)"
    ),
    draft: bool = typer.Option(False, "--draft", "-d", help="Open as a draft pull request"),
    web: bool = typer.Option(False, "--web", "-w", help="Open the compare page in the browser instead"),
    repo: Path = typer.Option(
        None,
        "--repo", "-r",
        path_type=Path,
        help="Repository path (default: current directory)",
    ),
    token: str = typer.Option(
        "", "--token", help="GitHub token (default: config token, then GH_TOKEN, then GITHUB_TOKEN)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
):
    """Create a pull request for the current branch."""
    setup_logging(verbose)

    try:
        root = _find_repo_root(repo or Path.cwd())
        if not root:
            raise GitError("Not a git repository", "Run from inside a repo or pass --repo.")

        config = GhprConfig.discover(root)
        token = token or config.github.token_resolved
        if not token:
            raise ConfigError("GitHub token required", "Set GITHUB_TOKEN or GH_TOKEN, or pass --token.")

        if not web and title is None:
            title = typer.prompt("Title")

        with GitHubClient(
            token=token,
            api_url=config.github.api_url,
            timeout=config.github.timeout_seconds,
        ) as gh:
            orch = Orchestrator(config, root, gh)
            result = orch.run(
                title=title or "",
                body=body,
                base=base,
                draft=draft,
                web=web,
                on_warning=lambda n: print_warning(pluralize(n, "uncommitted change")),
                on_creating=lambda t: print_creating(t.head_ref, t.base_ref, t.base_repo.full_name),
                on_opening=print_opening,
            )
    except GhprError as e:
        print_error(str(e), e.hint)
        raise typer.Exit(1)

    if result.pull_request:
        typer.echo(result.pull_request.url)


@app.command()
def version():
    """Show version information."""
    from ghpr import __version__

    typer.echo(f"ghpr version {__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
