"""
Pull request target resolution.

Given the current branch, the configured remotes and metadata for the
repositories behind them, decide which repository receives the pull request
(base), which one holds the branch (head), and how both refs are named.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ghpr.errors import AmbiguousRemoteError, RepositoryResolutionError
from ghpr.integrations.github_client import RepositoryInfo
from ghpr.tools.git_tools import Remote

logger = logging.getLogger("ghpr.resolver")

# Remotes that conventionally point at the canonical repository, after the default one.
_PREFERRED_REMOTES = ("upstream", "github")


@dataclass(frozen=True)
class BaseDecision:
    """Snapshot of what the base repository choice depends on."""

    head: RepositoryInfo
    viewer_can_push_head: bool


@dataclass(frozen=True)
class PRTarget:
    """Where a pull request goes and what it is called there."""

    branch: str
    head_remote: str
    head_repo: RepositoryInfo
    base_repo: RepositoryInfo
    base_ref: str
    head_ref: str

    @property
    def base_repository_id(self) -> str:
        return self.base_repo.id

    @property
    def is_cross_repository(self) -> bool:
        return self.base_repo.id != self.head_repo.id


def order_remotes(remotes: Iterable[Remote], default_remote: str = "origin") -> list[Remote]:
    """Default remote first, then upstream and github, then the rest by name."""
    priority = (default_remote, *_PREFERRED_REMOTES)

    def key(remote: Remote) -> tuple[int, str]:
        rank = priority.index(remote.name) if remote.name in priority else len(priority)
        return rank, remote.name

    return sorted(remotes, key=key)


def choose_base_repository(decision: BaseDecision) -> RepositoryInfo:
    """A pushable fork contributes upstream to its parent; anything else targets itself."""
    if decision.head.parent is not None and decision.viewer_can_push_head:
        return decision.head.parent
    return decision.head


def select_head_remote(
    remotes: Iterable[Remote],
    repositories: Mapping[str, RepositoryInfo],
    tracking_remote: str | None = None,
    default_remote: str = "origin",
) -> Remote:
    """Pick the remote the branch lives on."""
    ordered = order_remotes(remotes, default_remote)
    by_name = {r.name: r for r in ordered}

    if not ordered:
        raise AmbiguousRemoteError("No GitHub remotes found in this repository")

    if tracking_remote and tracking_remote in by_name:
        logger.debug("Head remote %s: branch upstream", tracking_remote)
        return by_name[tracking_remote]

    for remote in ordered:
        repo = repositories.get(remote.name)
        if repo is not None and repo.is_fork and repo.viewer_can_push:
            logger.debug("Head remote %s: pushable fork of %s", remote.name, repo.parent.full_name)
            return remote

    if default_remote in by_name:
        logger.debug("Head remote %s: configured default", default_remote)
        return by_name[default_remote]

    if len(ordered) == 1:
        return ordered[0]

    names = ", ".join(r.name for r in ordered)
    raise AmbiguousRemoteError(
        f"Cannot determine which remote holds the branch (remotes: {names})"
    )


def head_ref_name(branch: str, head: RepositoryInfo, base: RepositoryInfo) -> str:
    if head.id == base.id:
        return branch
    return f"{head.owner}:{branch}"


def resolve_target(
    branch: str,
    remotes: Iterable[Remote],
    repositories: Mapping[str, RepositoryInfo],
    tracking_remote: str | None = None,
    default_remote: str = "origin",
    base_branch: str | None = None,
) -> PRTarget:
    """Resolve the base/head repositories and refs for ``branch``."""
    remote = select_head_remote(remotes, repositories, tracking_remote, default_remote)

    head = repositories.get(remote.name)
    if head is None:
        raise RepositoryResolutionError(
            f"Could not fetch repository {remote.repo.full_name} (remote {remote.name})"
        )

    base = choose_base_repository(BaseDecision(head=head, viewer_can_push_head=head.viewer_can_push))
    base_ref = base_branch or base.default_branch
    if not base_ref:
        raise RepositoryResolutionError(
            f"Repository {base.full_name} has no default branch; pass --base"
        )

    target = PRTarget(
        branch=branch,
        head_remote=remote.name,
        head_repo=head,
        base_repo=base,
        base_ref=base_ref,
        head_ref=head_ref_name(branch, head, base),
    )
    logger.debug(
        "Target: %s into %s in %s", target.head_ref, target.base_ref, base.full_name
    )
    return target
