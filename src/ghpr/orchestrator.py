"""
Pull request creation flow.

Flow:
1. Read the current branch
2. Warn about uncommitted changes (never blocks)
3. Read remotes, fetch their repositories in one batched query
4. Resolve base/head target
5. Push the branch
6. Create the PR via GraphQL, or open the compare page in the browser
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from ghpr.config import GhprConfig
from ghpr.integrations.github_client import GitHubClient, PullRequestInfo, RepositoryBatch
from ghpr.resolver import PRTarget, order_remotes, resolve_target
from ghpr.tools import GitTools, compare_path, compare_url, open_in_browser

logger = logging.getLogger("ghpr.orchestrator")


@dataclass
class CreateResult:
    """Outcome of a ``pr create`` run."""

    target: PRTarget
    pull_request: PullRequestInfo | None = None
    web_url: str | None = None


class Orchestrator:
    """Runs one pull request creation from local branch to URL."""

    def __init__(self, config: GhprConfig, repo_root: Path, github: GitHubClient):
        self.config = config
        self.repo_root = Path(repo_root)
        self.git = GitTools(self.repo_root)
        self.github = github

    def resolve(self, branch: str, base: str | None = None) -> PRTarget:
        """Fetch every remote's repository in one query and resolve the target."""
        default_remote = self.config.git.remote
        remotes = order_remotes(self.git.remotes(self.config.github.host), default_remote)
        tracking = self.git.tracking_remote(branch)

        batch = RepositoryBatch({r.name: r.repo for r in remotes})
        repositories = self.github.fetch_repositories(batch)

        return resolve_target(
            branch,
            remotes,
            repositories,
            tracking_remote=tracking,
            default_remote=default_remote,
            base_branch=base,
        )

    def run(
        self,
        title: str = "",
        body: str = "",
        base: str | None = None,
        draft: bool = False,
        web: bool = False,
        on_warning: Callable[[int], None] | None = None,
        on_creating: Callable[[PRTarget], None] | None = None,
        on_opening: Callable[[str], None] | None = None,
    ) -> CreateResult:
        """Execute a full ``pr create`` run."""
        _warning = on_warning or (lambda n: None)
        _creating = on_creating or (lambda t: None)
        _opening = on_opening or (lambda u: None)

        branch = self.git.current_branch()

        changes = self.git.uncommitted_change_count()
        if changes:
            logger.debug("%d uncommitted changes in %s", changes, self.repo_root)
            _warning(changes)

        target = self.resolve(branch, base)
        result = CreateResult(target=target)

        host = self.config.github.host
        if web:
            self.git.push(target.head_remote, branch)
            result.web_url = compare_url(host, target.base_repo.full_name, target.base_ref, target.head_ref)
            _opening(compare_path(host, target.base_repo.full_name, target.base_ref, target.head_ref))
            open_in_browser(result.web_url)
            return result

        _creating(target)
        self.git.push(target.head_remote, branch)
        logger.info("Pushed %s to %s", branch, target.head_remote)

        result.pull_request = self.github.create_pull_request(
            repository_id=target.base_repository_id,
            title=title,
            body=body,
            base_ref=target.base_ref,
            head_ref=target.head_ref,
            draft=draft,
        )
        return result

