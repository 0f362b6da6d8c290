"""Deterministic tools: git and browser."""

from ghpr.tools.git_tools import GitTools, Remote, RepoRef
from ghpr.tools.pr_tools import compare_path, compare_url, open_in_browser

__all__ = ["GitTools", "Remote", "RepoRef", "compare_path", "compare_url", "open_in_browser"]
