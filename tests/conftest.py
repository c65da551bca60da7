"""Shared factories and fixtures for the test suite."""
from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ghcherry.client import GitHubClient
from ghcherry.config import Settings
from ghcherry.git import GitRepo
from ghcherry.models import CommitRef, CreatedPullRequest, PullRequestState, Review, TriggerEvent

API = "https://api.github.com"

# ---------------------------------------------------------------------------
# REST payload factories: return raw dicts that mirror API responses
# ---------------------------------------------------------------------------


def pull_json(
    number: int = 7,
    merged: bool | None = True,
    merge_commit_sha: str | None = "m" * 40,
    base_repo: str = "owner/repo",
    head_ref: str = "fix-bug",
) -> dict:
    return {
        "number": number,
        "merged": merged,
        "merge_commit_sha": merge_commit_sha,
        "base": {"ref": "main", "repo": {"full_name": base_repo}},
        "head": {"ref": head_ref, "repo": {"full_name": base_repo}},
    }


def commit_json(sha: str = "a1", message: str = "Fix bug") -> dict:
    return {"sha": sha, "commit": {"message": message}}


def review_json(login: str | None = "carol", state: str = "APPROVED") -> dict:
    return {"user": {"login": login} if login else None, "state": state}


def created_pull_json(number: int = 8, draft: bool = True) -> dict:
    return {
        "number": number,
        "html_url": f"https://github.com/owner/repo/pull/{number}",
        "draft": draft,
    }


def event_payload(
    number: int | None = 7,
    comment_body: str = "/cherry-pick release-2.1",
    login: str | None = "alice",
    title: str = "Fix bug",
    body: str | None = "Fixes the bug.",
    repo: str = "owner/repo",
) -> dict:
    payload: dict = {
        "repository": {"full_name": repo},
        "comment": {"body": comment_body, "user": {"login": login} if login else None},
        "issue": {"title": title, "body": body},
    }
    if number is not None:
        payload["issue"]["number"] = number
    return payload


# ---------------------------------------------------------------------------
# Model object factories: construct typed model instances
# ---------------------------------------------------------------------------


def make_settings(**overrides) -> Settings:
    values = {
        "token": "default-token",
        "repository": "owner/repo",
        "event_path": Path("event.json"),
        "max_retries": 3,
        "retry_interval": 10,
        "run_id": "42",
    }
    values.update(overrides)
    return Settings(**values)


def make_event(
    pr_number: int = 7,
    comment_body: str = "/cherry-pick release-2.1",
    comment_author: str = "alice",
    title: str = "Fix bug",
    body: str = "Fixes the bug.",
    repo_full_name: str = "owner/repo",
) -> TriggerEvent:
    return TriggerEvent(
        repo_full_name=repo_full_name,
        pr_number=pr_number,
        comment_body=comment_body,
        comment_author=comment_author,
        title=title,
        body=body,
    )


def make_state(merged: bool | None = True, head_ref: str = "fix-bug") -> PullRequestState:
    return PullRequestState(
        merged=merged,
        merge_commit_sha="m" * 40 if merged else None,
        base_repo="owner/repo",
        head_ref=head_ref,
    )


def make_commits(*shas: str) -> list[CommitRef]:
    return [CommitRef(sha=sha, message=f"Change {sha}") for sha in shas]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client():
    """A GitHubClient double for a merged PR with two commits and one approval."""
    mock = MagicMock(spec=GitHubClient)
    mock.get_pull.return_value = make_state()
    mock.list_commits.return_value = make_commits("a1", "b2")
    mock.list_reviews.return_value = [Review(login="carol", state="APPROVED")]
    mock.get_user.return_value = {"name": "Alice Liddell", "email": "alice@example.com"}
    mock.create_pull.return_value = CreatedPullRequest(
        number=8, url="https://github.com/owner/repo/pull/8", draft=True
    )
    return mock


@pytest.fixture
def git():
    return MagicMock(spec=GitRepo)


@pytest.fixture(autouse=True)
def no_sleep(mocker):
    return mocker.patch("ghcherry.runner.time.sleep")
