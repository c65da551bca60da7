from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TriggerEvent:
    repo_full_name: str
    pr_number: int
    comment_body: str
    comment_author: str
    title: str
    body: str


@dataclass(frozen=True)
class PullRequestState:
    merged: bool | None
    merge_commit_sha: str | None
    base_repo: str | None
    head_ref: str


@dataclass(frozen=True)
class CommitRef:
    sha: str
    message: str


@dataclass(frozen=True)
class Review:
    login: str | None
    state: str


@dataclass(frozen=True)
class Identity:
    login: str
    name: str
    email: str
    token: str = field(repr=False)


@dataclass(frozen=True)
class BranchPlan:
    target: str
    temp: str

    @property
    def local_ref(self) -> str:
        return f"upstream/{self.temp}"


@dataclass(frozen=True)
class CreatedPullRequest:
    number: int
    url: str
    draft: bool
