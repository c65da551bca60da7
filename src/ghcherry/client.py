from __future__ import annotations

import time
from typing import Any

import httpx
from rich.console import Console

from .config import DEFAULT_API_URL
from .errors import (
    ApiError,
    AuthError,
    DraftsNotSupportedError,
    NetworkError,
    NotFoundError,
    RateLimitError,
)
from .models import CommitRef, CreatedPullRequest, PullRequestState, Review

_RETRY_DELAYS = (1, 5, 15)
_PAGE_SIZE = 100
_DRAFTS_NOT_SUPPORTED = "Draft pull requests are not supported"
_stderr = Console(stderr=True)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    if not isinstance(data, dict):
        return response.text
    parts = [data.get("message", "")]
    for err in data.get("errors") or []:
        if isinstance(err, dict) and err.get("message"):
            parts.append(err["message"])
        elif isinstance(err, str):
            parts.append(err)
    return " ".join(p for p in parts if p) or response.text


class GitHubClient:
    def __init__(self, token: str, api_url: str = DEFAULT_API_URL) -> None:
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=httpx.Timeout(30.0),
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        retry: bool = True,
    ) -> httpx.Response:
        """Send one API request.

        Timeouts and 5xx responses are retried only when ``retry`` is set;
        writes pass ``retry=False`` so nothing is ever posted twice.
        """
        delays = (*_RETRY_DELAYS, None) if retry else (None,)
        last_exc: Exception | None = None
        for delay in delays:
            try:
                response = self._client.request(method, url, params=params, json=json)
            except httpx.TimeoutException as exc:
                last_exc = exc
                if delay is not None:
                    time.sleep(delay)
                continue
            except httpx.RequestError as exc:
                raise NetworkError(str(exc)) from exc

            status = response.status_code
            if status == 401:
                raise AuthError("GitHub token is invalid or missing required scopes.", status)
            if status >= 500:
                last_exc = ApiError(f"GitHub API returned HTTP {status}", status)
                if delay is not None:
                    time.sleep(delay)
                continue

            remaining = response.headers.get("X-RateLimit-Remaining")
            if status in (403, 429) and remaining == "0":
                reset_at = response.headers.get("X-RateLimit-Reset", "unknown")
                raise RateLimitError(f"GitHub rate limit exhausted. Resets at {reset_at}.", status)
            if remaining is not None and remaining.isdigit() and int(remaining) < 100:
                _stderr.print(
                    f"[yellow]Warning:[/yellow] GitHub rate limit low: {remaining} requests remaining"
                )

            if status == 404:
                raise NotFoundError(f"{method} {url} returned HTTP 404: {_error_message(response)}", status)
            if status >= 400:
                message = _error_message(response)
                if status == 422 and _DRAFTS_NOT_SUPPORTED in message:
                    raise DraftsNotSupportedError(message, status)
                raise ApiError(f"GitHub API returned HTTP {status}: {message}", status)

            return response

        raise NetworkError(f"Request failed: {last_exc}") from last_exc

    def _paginate(self, url: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        next_url: str | None = url
        params: dict[str, Any] | None = {"per_page": _PAGE_SIZE}
        while next_url:
            response = self.request("GET", next_url, params=params)
            items.extend(response.json())
            next_url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            params = None
        return items

    def get_pull(self, repo: str, number: int) -> PullRequestState:
        data = self.request("GET", f"/repos/{repo}/pulls/{number}").json()
        base_repo = (data.get("base") or {}).get("repo") or {}
        return PullRequestState(
            merged=data.get("merged"),
            merge_commit_sha=data.get("merge_commit_sha"),
            base_repo=base_repo.get("full_name"),
            head_ref=(data.get("head") or {}).get("ref", ""),
        )

    def list_commits(self, repo: str, number: int) -> list[CommitRef]:
        return [
            CommitRef(sha=c["sha"], message=c["commit"]["message"])
            for c in self._paginate(f"/repos/{repo}/pulls/{number}/commits")
        ]

    def list_reviews(self, repo: str, number: int) -> list[Review]:
        return [
            Review(login=r["user"]["login"] if r.get("user") else None, state=r["state"])
            for r in self._paginate(f"/repos/{repo}/pulls/{number}/reviews")
        ]

    def get_user(self, login: str) -> dict[str, Any]:
        return self.request("GET", f"/users/{login}").json()

    def create_comment(self, repo: str, number: int, body: str) -> str:
        data = self.request(
            "POST", f"/repos/{repo}/issues/{number}/comments", json={"body": body}, retry=False
        ).json()
        return data.get("html_url", "")

    def create_pull(
        self,
        repo: str,
        *,
        base: str,
        head: str,
        title: str,
        body: str,
        draft: bool = False,
    ) -> CreatedPullRequest:
        payload = {"base": base, "head": head, "title": title, "body": body, "draft": draft}
        data = self.request("POST", f"/repos/{repo}/pulls", json=payload, retry=False).json()
        return CreatedPullRequest(number=data["number"], url=data["html_url"], draft=data.get("draft", draft))

    def request_reviewers(self, repo: str, number: int, reviewers: list[str]) -> None:
        if not reviewers:
            return
        self.request(
            "POST",
            f"/repos/{repo}/pulls/{number}/requested_reviewers",
            json={"reviewers": reviewers},
            retry=False,
        )
