"""
GitHub integration for ghpr.

GraphQL over httpx, synchronous:
  - Look up metadata for several repositories in one batched query
  - Create a pull request with the createPullRequest mutation
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from ghpr.errors import GitHubAPIError, GraphQLError
from ghpr.tools.git_tools import RepoRef

logger = logging.getLogger("ghpr.github")

_API = "https://api.github.com/graphql"

_PUSH_PERMISSIONS = frozenset({"ADMIN", "MAINTAIN", "WRITE"})

REPOSITORY_FIELDS = """
fragment repositoryFields on Repository {
  id
  name
  owner { login }
  defaultBranchRef {
    name
    target { oid }
  }
  viewerPermission
}
""".strip()

CREATE_PULL_REQUEST_MUTATION = """
mutation CreatePullRequest($input: CreatePullRequestInput!) {
  createPullRequest(input: $input) {
    pullRequest {
      url
      number
    }
  }
}
""".strip()


@dataclass(frozen=True)
class RepositoryInfo:
    """Repository metadata as seen by the authenticated viewer."""

    id: str
    name: str
    owner: str
    default_branch: str | None
    default_branch_oid: str | None
    viewer_permission: str | None
    parent: RepositoryInfo | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def is_fork(self) -> bool:
        return self.parent is not None

    @property
    def viewer_can_push(self) -> bool:
        return (self.viewer_permission or "").upper() in _PUSH_PERMISSIONS

    @classmethod
    def from_graphql(cls, data: Mapping[str, Any]) -> RepositoryInfo:
        branch_ref = data.get("defaultBranchRef") or {}
        parent = data.get("parent")
        return cls(
            id=data["id"],
            name=data["name"],
            owner=(data.get("owner") or {}).get("login", ""),
            default_branch=branch_ref.get("name"),
            default_branch_oid=(branch_ref.get("target") or {}).get("oid"),
            viewer_permission=data.get("viewerPermission"),
            parent=cls.from_graphql(parent) if parent else None,
        )


@dataclass
class PullRequestInfo:
    """A created pull request."""

    url: str
    number: int | None = None


class RepositoryBatch:
    """
    Several ``repository`` lookups sent as one GraphQL document.

    Each logical key (a remote name) gets a generated alias; the response is
    decoded back into a mapping keyed by the same logical keys, so callers
    never depend on alias order.
    """

    def __init__(self, repos: Mapping[str, RepoRef]):
        self.repos = dict(repos)
        self.aliases = {key: f"repo_{i:03d}" for i, key in enumerate(self.repos)}

    def __len__(self) -> int:
        return len(self.repos)

    def query(self) -> str:
        fields = []
        for alias in self.aliases.values():
            fields.append(
                f"  {alias}: repository(owner: $owner_{alias}, name: $name_{alias}) {{\n"
                "    ...repositoryFields\n"
                "    parent { ...repositoryFields }\n"
                "  }"
            )
        params = ", ".join(
            f"$owner_{alias}: String!, $name_{alias}: String!" for alias in self.aliases.values()
        )
        return f"{REPOSITORY_FIELDS}\n\nquery RepositoryNetwork({params}) {{\n" + "\n".join(fields) + "\n}"

    def variables(self) -> dict[str, str]:
        variables: dict[str, str] = {}
        for key, ref in self.repos.items():
            alias = self.aliases[key]
            variables[f"owner_{alias}"] = ref.owner
            variables[f"name_{alias}"] = ref.name
        return variables

    def decode(self, data: Mapping[str, Any]) -> dict[str, RepositoryInfo]:
        """Map the response back to logical keys. Unresolvable repositories are left out."""
        result: dict[str, RepositoryInfo] = {}
        for key, alias in self.aliases.items():
            repo_data = data.get(alias)
            if not repo_data:
                logger.debug("No repository data for %s (%s)", key, self.repos[key].full_name)
                continue
            result[key] = RepositoryInfo.from_graphql(repo_data)
        return result


class GitHubClient:
    """Synchronous GitHub GraphQL client using httpx."""

    def __init__(
        self,
        token: str,
        api_url: str = _API,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.token = token
        self.api_url = api_url
        self._client = httpx.Client(
            headers=self._headers,
            timeout=timeout,
            transport=transport,
        )

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
        }

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def graphql(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        allow_partial: bool = False,
    ) -> dict[str, Any]:
        """
        POST a GraphQL document and return its ``data``.

        With ``allow_partial`` a response that has both data and errors is
        accepted (batched lookups report unknown repositories that way).
        """
        try:
            resp = self._client.post(
                self.api_url,
                json={"query": query, "variables": variables or {}},
            )
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub API request failed: {e}") from e

        if resp.status_code >= 400:
            raise GitHubAPIError(
                f"GitHub API returned HTTP {resp.status_code}: {resp.text[:500]}",
                status_code=resp.status_code,
            )
        try:
            payload = resp.json()
        except ValueError as e:
            raise GitHubAPIError("GitHub API returned a non-JSON response") from e

        errors = payload.get("errors") or []
        data = payload.get("data")
        if errors:
            if not (allow_partial and data):
                raise GraphQLError(errors)
            for err in errors:
                logger.debug("GraphQL partial error: %s", err.get("message"))
        return data or {}

    # ── Repositories ───────────────────────────────────────────

    def fetch_repositories(self, batch: RepositoryBatch) -> dict[str, RepositoryInfo]:
        """Fetch metadata for every repository in the batch in one round trip."""
        if not len(batch):
            return {}
        data = self.graphql(batch.query(), batch.variables(), allow_partial=True)
        repos = batch.decode(data)
        logger.debug("Resolved repositories: %s", {k: v.full_name for k, v in repos.items()})
        return repos

    # ── Pull Requests ──────────────────────────────────────────

    def create_pull_request(
        self,
        repository_id: str,
        title: str,
        body: str,
        base_ref: str,
        head_ref: str,
        draft: bool = False,
    ) -> PullRequestInfo:
        """Create a pull request."""
        variables = {
            "input": {
                "repositoryId": repository_id,
                "title": title,
                "body": body,
                "baseRefName": base_ref,
                "headRefName": head_ref,
                "draft": draft,
            }
        }
        data = self.graphql(CREATE_PULL_REQUEST_MUTATION, variables)
        pr = ((data.get("createPullRequest") or {}).get("pullRequest")) or {}
        if not pr.get("url"):
            raise GitHubAPIError("createPullRequest returned no pull request")
        info = PullRequestInfo(url=pr["url"], number=pr.get("number"))
        logger.info("Created PR #%s: %s", info.number, info.url)
        return info
