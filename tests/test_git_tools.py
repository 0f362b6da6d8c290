from __future__ import annotations

import pytest

from ghpr.errors import GitError
from ghpr.tools.git_tools import GitTools, RepoRef, parse_remote_url, parse_remotes


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/OWNER/REPO.git",
        "https://github.com/OWNER/REPO",
        "git@github.com:OWNER/REPO.git",
        "ssh://git@github.com/OWNER/REPO.git",
        "ssh://git@github.com:22/OWNER/REPO",
    ],
)
def test_parse_remote_url(url):
    assert parse_remote_url(url) == RepoRef("OWNER", "REPO")


def test_parse_remote_url_keeps_dots_in_name():
    assert parse_remote_url("git@github.com:OWNER/my.repo.git") == RepoRef("OWNER", "my.repo")


def test_parse_remote_url_other_host():
    assert parse_remote_url("git@gitlab.com:OWNER/REPO.git") is None
    assert parse_remote_url("https://ghe.example.com/OWNER/REPO", host="ghe.example.com") == RepoRef(
        "OWNER", "REPO"
    )


def test_parse_remotes_uses_fetch_urls():
    output = (
        "origin\thttps://github.com/OWNER/REPO.git (fetch)\n"
        "origin\thttps://github.com/OWNER/REPO.git (push)\n"
        "fork\tgit@github.com:MYSELF/REPO.git (fetch)\n"
        "fork\tgit@github.com:MYSELF/REPO.git (push)\n"
        "other\tgit@gitlab.com:X/Y.git (fetch)\n"
    )
    remotes = parse_remotes(output)
    assert [(r.name, r.repo.full_name) for r in remotes] == [("origin", "OWNER/REPO"), ("fork", "MYSELF/REPO")]


def test_parse_remote_url_host_is_case_insensitive():
    assert parse_remote_url("git@GitHub.com:OWNER/REPO.git") == RepoRef("OWNER", "REPO")
    assert parse_remote_url("https://GITHUB.COM/OWNER/REPO") == RepoRef("OWNER", "REPO")
    assert parse_remote_url("https://GHE.Example.com/OWNER/REPO", host="ghe.example.com") == RepoRef(
        "OWNER", "REPO"
    )


def test_uncommitted_change_count(tmp_path, fake_git):
    fake_git.status = " M git/git.go\n?? new.txt\n"
    assert GitTools(tmp_path).uncommitted_change_count() == 2


def test_clean_tree(tmp_path, fake_git):
    assert GitTools(tmp_path).uncommitted_change_count() == 0


def test_push_sets_upstream(tmp_path, fake_git):
    GitTools(tmp_path).push("origin", "feature")
    assert fake_git.calls[-1] == ["git", "push", "--set-upstream", "origin", "HEAD:feature"]


def test_tracking_remote(tmp_path, fake_git):
    git = GitTools(tmp_path)
    assert git.tracking_remote("feature") is None
    fake_git.tracking = "fork"
    assert git.tracking_remote("feature") == "fork"
    assert fake_git.calls[-1] == ["git", "config", "--get", "branch.feature.remote"]


def test_current_branch_detached(tmp_path, fake_git):
    fake_git.branch = ""
    with pytest.raises(GitError):
        GitTools(tmp_path).current_branch()


def test_failed_command_raises_git_error(tmp_path, fake_git):
    fake_git.fail("push", "! [rejected] feature -> feature (non-fast-forward)")
    with pytest.raises(GitError) as exc:
        GitTools(tmp_path).push("origin", "feature")
    assert "git push failed" in str(exc.value)
    assert "non-fast-forward" in exc.value.hint
