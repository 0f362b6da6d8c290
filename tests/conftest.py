from __future__ import annotations

import functools
import json
import subprocess
from pathlib import Path
from typing import Any

import httpx
import pytest

from ghpr import cli
from ghpr.integrations.github_client import GitHubClient
from ghpr.tools import git_tools


def repo_json(
    owner: str,
    name: str,
    repo_id: str = "REPOID",
    default_branch: str = "master",
    permission: str = "WRITE",
    parent: dict[str, Any] | None = None,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": repo_id,
        "name": name,
        "owner": {"login": owner},
        "defaultBranchRef": {"name": default_branch, "target": {"oid": "deadbeef"}},
        "viewerPermission": permission,
    }
    if parent is not None:
        data["parent"] = parent
    return data


def pr_created_json(url: str = "https://github.com/OWNER/REPO/pull/12", number: int = 12) -> dict:
    return {"data": {"createPullRequest": {"pullRequest": {"url": url, "number": number}}}}


class FakeGit:
    """Stands in for ``subprocess.run`` and answers the git commands ghpr issues."""

    def __init__(
        self,
        branch: str = "feature",
        remotes: dict[str, str] | None = None,
        status: str = "",
        tracking: str | None = None,
    ):
        self.branch = branch
        self.remotes = remotes if remotes is not None else {"origin": "OWNER/REPO"}
        self.status = status
        self.tracking = tracking
        self.failures: dict[str, str] = {}
        self.calls: list[list[str]] = []

    def fail(self, subcommand: str, stderr: str = "fatal: boom") -> None:
        self.failures[subcommand] = stderr

    def ran(self, subcommand: str) -> list[list[str]]:
        return [c for c in self.calls if c[1] == subcommand]

    def __call__(self, cmd, cwd=None, capture_output=False, text=False, check=False):
        cmd = list(cmd)
        self.calls.append(cmd)
        sub = cmd[1]
        if sub in self.failures:
            if check:
                raise subprocess.CalledProcessError(128, cmd, output="", stderr=self.failures[sub])
            return subprocess.CompletedProcess(cmd, 128, "", self.failures[sub])

        if sub == "branch":
            out = f"{self.branch}\n" if self.branch else "\n"
        elif sub == "remote":
            out = "".join(
                f"{name}\thttps://github.com/{repo}.git (fetch)\n"
                f"{name}\thttps://github.com/{repo}.git (push)\n"
                for name, repo in self.remotes.items()
            )
        elif sub == "config":
            if not self.tracking:
                return subprocess.CompletedProcess(cmd, 1, "", "")
            out = f"{self.tracking}\n"
        elif sub == "status":
            out = self.status
        elif sub == "push":
            out = ""
        else:
            raise AssertionError(f"unexpected git command: {cmd}")
        return subprocess.CompletedProcess(cmd, 0, out, "")


class GraphQLStub:
    """Queue of canned GraphQL responses served through ``httpx.MockTransport``."""

    def __init__(self):
        self.responses: list[tuple[int, Any]] = []
        self.requests: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []

    def respond(self, payload: Any, status: int = 200) -> None:
        self.responses.append((status, payload))

    def respond_repos(self, **repos: dict[str, Any]) -> None:
        self.respond({"data": repos})

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        self.headers.append(request.headers)
        if not self.responses:
            raise AssertionError(f"unexpected GraphQL request: {request.content!r}")
        status, payload = self.responses.pop(0)
        return httpx.Response(status, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def client(self, token: str = "TOKEN") -> GitHubClient:
        return GitHubClient(token=token, transport=self.transport)


@pytest.fixture
def graphql() -> GraphQLStub:
    return GraphQLStub()


@pytest.fixture
def fake_git(monkeypatch: pytest.MonkeyPatch) -> FakeGit:
    fake = FakeGit()
    monkeypatch.setattr(git_tools.subprocess, "run", fake)
    return fake


@pytest.fixture
def launched(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    urls: list[str] = []
    monkeypatch.setattr("typer.launch", lambda url, **kwargs: urls.append(url) or 0)
    return urls


@pytest.fixture
def repo_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    monkeypatch.chdir(repo)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("GITHUB_TOKEN", "TOKEN")
    monkeypatch.delenv("GH_TOKEN", raising=False)
    return repo


@pytest.fixture
def cli_env(repo_dir: Path, fake_git: FakeGit, graphql: GraphQLStub, launched: list[str], monkeypatch):
    """A repository directory with git, GitHub and the browser all faked."""
    monkeypatch.setattr(cli, "GitHubClient", functools.partial(GitHubClient, transport=graphql.transport))
    return repo_dir
