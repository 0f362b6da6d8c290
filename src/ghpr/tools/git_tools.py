"""Git operations - branch, remotes, status, push."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

from ghpr.errors import GitError

logger = logging.getLogger("ghpr.git")

# git@host:owner/repo.git, ssh://git@host/owner/repo.git, https://host/owner/repo.git
_REMOTE_URL_RE = re.compile(
    r"^(?:[a-z+]+://)?(?:[^@/]+@)?(?P<host>[^:/]+)(?::\d+)?[:/](?P<owner>[^/]+)/(?P<name>[^/]+?)(?:\.git)?/?$"
)


@dataclass(frozen=True)
class RepoRef:
    """An owner/name pair identifying a repository."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class Remote:
    """A named git remote pointing at a repository."""

    name: str
    repo: RepoRef


def parse_remote_url(url: str, host: str = "github.com") -> RepoRef | None:
    """Return the repository a remote URL points at, or None if it is not on ``host``."""
    m = _REMOTE_URL_RE.match(url.strip())
    if not m or m.group("host").lower() != host.lower():
        return None
    return RepoRef(owner=m.group("owner"), name=m.group("name"))


def parse_remotes(output: str, host: str = "github.com") -> list[Remote]:
    """Parse ``git remote -v`` output, keeping fetch URLs on ``host``."""
    remotes: dict[str, Remote] = {}
    for line in output.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        name, url = parts[0], parts[1]
        kind = parts[2] if len(parts) > 2 else "(fetch)"
        if kind != "(fetch)" or name in remotes:
            continue
        repo = parse_remote_url(url, host)
        if repo is None:
            logger.debug("Ignoring remote %s (%s): not on %s", name, url, host)
            continue
        remotes[name] = Remote(name=name, repo=repo)
    return list(remotes.values())


class GitTools:
    """Deterministic git operations for a pull request run."""

    def __init__(self, repo_path: Path):
        self.repo_path = Path(repo_path)

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        logger.debug("git %s", " ".join(args))
        try:
            return subprocess.run(
                ["git", *args],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=check,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {args[0]} failed with exit code {e.returncode}", e.stderr or "") from e

    def current_branch(self) -> str:
        result = self._run("branch", "--show-current")
        branch = result.stdout.strip()
        if not branch:
            raise GitError("Not on any branch (detached HEAD)")
        return branch

    def remotes(self, host: str = "github.com") -> list[Remote]:
        result = self._run("remote", "-v")
        return parse_remotes(result.stdout, host)

    def tracking_remote(self, branch: str) -> str | None:
        """Remote the branch is configured to track, if any."""
        result = self._run("config", "--get", f"branch.{branch}.remote", check=False)
        return result.stdout.strip() or None

    def status(self) -> str:
        result = self._run("status", "--porcelain")
        return result.stdout

    def uncommitted_change_count(self) -> int:
        return len([line for line in self.status().splitlines() if line.strip()])

    def push(self, remote: str, branch: str) -> None:
        """Publish HEAD as ``branch`` on ``remote`` and track it."""
        result = self._run("push", "--set-upstream", remote, f"HEAD:{branch}")
        logger.debug("git push output:\n%s", (result.stdout + result.stderr).strip())
