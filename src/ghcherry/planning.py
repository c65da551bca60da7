from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .models import BranchPlan, CommitRef, Identity, Review

MERGE_MARKER = "Merge"
REVIEW_STATES = frozenset({"APPROVED", "CHANGES_REQUESTED"})
NAME_SUFFIX = " (Cherry Pick PR Action)"


def filter_commits(commits: Iterable[CommitRef]) -> list[str]:
    """Return the SHAs to replay, in order, skipping merge commits.

    A commit counts as a merge when its message contains ``"Merge"``
    anywhere, so an ordinary commit such as "Merge conflict docs" is
    skipped as well. Parent counts are not consulted.
    """
    return [c.sha for c in commits if MERGE_MARKER not in c.message]


def resolve_reviewers(reviews: Iterable[Review]) -> list[str]:
    """Logins that approved or requested changes, once each, sorted."""
    return sorted({r.login for r in reviews if r.login and r.state in REVIEW_STATES})


def join_reviewers(reviewers: Iterable[str]) -> str:
    return ",".join(reviewers)


def derive_branch_plan(comment_body: str, head_ref: str) -> BranchPlan:
    """``/cherry-pick release-2.1`` on head ``fix-x`` targets ``release-2.1``
    through the temporary branch ``cherry/release-2.1/fix-x``.
    """
    tokens = comment_body.split()
    target = "".join(tokens[1].split()) if len(tokens) > 1 else ""
    return BranchPlan(target=target, temp=f"cherry/{target}/{head_ref}")


def token_env_key(login: str) -> str:
    return f"{login.replace('-', '_')}_TOKEN"


def resolve_identity(
    login: str,
    profile: Mapping[str, Any],
    environ: Mapping[str, str],
    default_token: str,
) -> Identity:
    name = profile.get("name") or login
    email = profile.get("email") or f"{login}@users.noreply.github.com"
    token = environ.get(token_env_key(login)) or default_token
    return Identity(
        login=login,
        name=f"{name}{NAME_SUFFIX}",
        email=email,
        token="".join(token.split()),
    )
