"""Errors raised while creating a pull request."""

from __future__ import annotations


class GhprError(Exception):
    """Base class for errors reported to the user."""

    hint: str = ""

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        if hint:
            self.hint = hint.strip()


class ConfigError(GhprError):
    """Configuration could not be loaded, or a required setting is missing."""


class GitError(GhprError):
    """A git command failed or the local repository is in an unusable state."""


class AmbiguousRemoteError(GhprError):
    """The remote holding the branch cannot be determined."""

    hint = "Set the branch upstream (git push -u <remote> <branch>) or configure git.remote."


class RepositoryResolutionError(GhprError):
    """Repository metadata for a required remote could not be fetched."""


class GitHubAPIError(GhprError):
    """The GitHub API could not be reached or answered with an HTTP error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GraphQLError(GitHubAPIError):
    """The GraphQL response carried errors."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        messages = [e.get("message", str(e)) for e in errors] or ["unknown GraphQL error"]
        super().__init__("\n".join(messages))
