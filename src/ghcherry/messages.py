"""Texts posted back to GitHub: the new pull request body and the outcome comments."""
from __future__ import annotations

from collections.abc import Sequence

FAILURE_PREFIX = "‼️"


def pr_body(original_body: str) -> str:
    lines = [
        "## Original Pull Request Description",
        original_body,
        "---",
        "## Cherry-Picked Pull Request",
        "Validation: ",
        "- _Please include new validation on the target branch_",
        "",
    ]
    return "\n".join(lines)


def not_merged() -> str:
    return f"{FAILURE_PREFIX} PR can't be cherry-picked, please merge it first."


def missing_target_branch() -> str:
    return f"{FAILURE_PREFIX} Cannot get target branch information."


def cherry_pick_failed(shas: Sequence[str], failed_sha: str, log: str) -> str:
    return (
        f"{FAILURE_PREFIX} Attempted to cherry-pick the following commits: {' '.join(shas)}"
        f"<br/><br/>Error during cherry-pick at {failed_sha}.<br/><br/>{log}"
    )


def push_failed(log: str) -> str:
    return f"{FAILURE_PREFIX} Error during push.<br/><br/>{log}"


def pr_creation_failed(log: str) -> str:
    return f"{FAILURE_PREFIX} Error during PR creation.<br/><br/>{log}"


def run_failed(run_url: str) -> str:
    return f"{FAILURE_PREFIX} cherry-pick action failed.<br/>See: {run_url}"


def succeeded(pr_url: str, run_url: str) -> str:
    return (
        "cherry-pick action finished successfully 🎉!"
        f"<br/>New PR created at: {pr_url} <br/>Action run: {run_url}"
    )
