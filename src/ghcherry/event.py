from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import TriggerError
from .models import TriggerEvent


def load_event(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as exc:
        raise TriggerError(f"Event payload not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise TriggerError(f"Event payload at {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise TriggerError(f"Event payload at {path} is not a JSON object.")
    return payload


def _get(payload: dict[str, Any], *keys: str) -> Any:
    node: Any = payload
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def parse_event(payload: dict[str, Any], pr_number: int | None = None) -> TriggerEvent:
    """Extract the fields of an ``issue_comment`` (or ``pull_request``) payload.

    ``pr_number`` overrides whatever number the payload carries.
    """
    if pr_number is None:
        pr_number = _get(payload, "pull_request", "number")
    if pr_number is None:
        pr_number = _get(payload, "issue", "number")
    if pr_number is None:
        raise TriggerError("Failed to determine PR Number.")

    repo_full_name = _get(payload, "repository", "full_name")
    if not repo_full_name:
        raise TriggerError("Event payload does not name a repository.")

    author = _get(payload, "comment", "user", "login") or _get(payload, "pull_request", "user", "login")
    if not author:
        raise TriggerError("Failed to determine the user who triggered the cherry-pick.")
    title = _get(payload, "issue", "title") or _get(payload, "pull_request", "title") or ""
    body = _get(payload, "issue", "body") or _get(payload, "pull_request", "body") or ""

    try:
        number = int(pr_number)
    except (TypeError, ValueError) as exc:
        raise TriggerError(f"PR number {pr_number!r} is not a number.") from exc

    return TriggerEvent(
        repo_full_name=repo_full_name,
        pr_number=number,
        comment_body=_get(payload, "comment", "body") or "",
        comment_author=author,
        title=title,
        body=body,
    )
