from __future__ import annotations

import time
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

from . import messages
from .client import GitHubClient
from .config import Settings
from .errors import (
    ApiError,
    DraftsNotSupportedError,
    GhCherryError,
    GitError,
    NetworkError,
    NotFoundError,
    RunAborted,
)
from .git import GitRepo, remote_url
from .models import BranchPlan, CommitRef, CreatedPullRequest, Identity, PullRequestState, Review, TriggerEvent
from .planning import derive_branch_plan, filter_commits, join_reviewers, resolve_identity, resolve_reviewers

_stderr = Console(stderr=True)

ClientFactory = Callable[[str], GitHubClient]


class CherryPickRun:
    """One cherry-pick request, from the triggering comment to the new pull request.

    Pull request data is read from ``settings.repository``; comments and the
    new pull request go to the repository named in the event, which is also
    the ``upstream`` remote the branch is pushed to. The pull request is
    opened with the committer's token, through a client from ``client_factory``
    when that token differs from the default one.
    """

    def __init__(
        self,
        settings: Settings,
        event: TriggerEvent,
        client: GitHubClient,
        git: GitRepo,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.settings = settings
        self.event = event
        self.client = client
        self.git = git
        self.client_factory = client_factory or (lambda token: GitHubClient(token, settings.api_url))

    @property
    def run_url(self) -> str:
        return self.settings.run_url(self.event.repo_full_name)

    def run(self) -> CreatedPullRequest:
        try:
            return self._run()
        except RunAborted:
            raise
        except Exception as exc:
            _stderr.print(f"[red]Error:[/red] {escape(str(exc))}")
            try:
                self.comment(messages.run_failed(self.run_url))
            except GhCherryError as comment_exc:
                _stderr.print(f"[red]Error:[/red] could not report the failure: {escape(str(comment_exc))}")
            raise RunAborted(f"cherry-pick action failed: {exc}") from exc

    def _run(self) -> CreatedPullRequest:
        number = self.event.pr_number
        _stderr.print(f"Collecting information about PR #{number} of {self.settings.repository}...")

        state, commits, reviews = self.fetch_state()
        shas = filter_commits(commits)
        _stderr.print(f"Commits: {' '.join(shas)}")
        reviewers = resolve_reviewers(reviews)
        _stderr.print(f"Reviewers: {join_reviewers(reviewers)}")

        if state.merged is not True:
            _stderr.print("[red]PR is not merged! Can't cherry pick it.[/red]")
            raise self.abort(messages.not_merged(), f"PR #{number} is not merged.")

        plan = derive_branch_plan(self.event.comment_body, state.head_ref)
        identity = self.resolve_identity()

        if not plan.target:
            _stderr.print(f"[red]Cannot get target branch information for PR #{number}![/red]")
            raise self.abort(messages.missing_target_branch(), "No target branch in the trigger comment.")
        _stderr.print(f"Target branch for PR #{number} is {plan.target}")

        self.prepare_branch(plan, identity)
        self.apply_commits(shas)
        self.push(plan)
        pr = self.publish(plan, identity, reviewers)

        _stderr.print(f"[green]Created {pr.url}[/green]")
        self.comment(messages.succeeded(pr.url, self.run_url))
        return pr

    def comment(self, body: str) -> None:
        self.client.create_comment(self.event.repo_full_name, self.event.pr_number, body)

    def abort(self, body: str, reason: str) -> RunAborted:
        """Report ``body`` on the pull request and return the error to raise."""
        self.comment(body)
        return RunAborted(reason)

    def fetch_state(self) -> tuple[PullRequestState, list[CommitRef], list[Review]]:
        """Poll until the merge status is known or the attempts run out.

        Open and not-yet-indexed pull requests look the same here; both are
        retried. The last response is returned either way.
        """
        repo, number = self.settings.repository, self.event.pr_number
        attempts = max(self.settings.max_retries, 1)
        for attempt in range(1, attempts + 1):
            state = self.client.get_pull(repo, number)
            commits = self.client.list_commits(repo, number)
            reviews = self.client.list_reviews(repo, number)
            if state.merged is not None:
                break
            if attempt < attempts:
                _stderr.print(
                    f"The PR is not ready to cherry-pick, retry after {self.settings.retry_interval} seconds"
                )
                time.sleep(self.settings.retry_interval)
        return state, commits, reviews

    def resolve_identity(self) -> Identity:
        login = self.event.comment_author
        try:
            profile = self.client.get_user(login)
        except NotFoundError:
            profile = {}
        return resolve_identity(login, profile, self.settings.environ, self.settings.token)

    def prepare_branch(self, plan: BranchPlan, identity: Identity) -> None:
        server = self.settings.server_url
        self.git.add_safe_directory()
        self.git.set_remote_url(
            "origin", remote_url(server, identity.login, identity.token, self.settings.repository)
        )
        self.git.set_identity(identity.name, identity.email)
        self.git.add_remote(
            "upstream", remote_url(server, identity.login, identity.token, self.event.repo_full_name)
        )
        self.git.fetch("origin", plan.target)
        self.git.fetch("upstream", plan.target)
        self.git.checkout_new_branch(plan.local_ref, f"upstream/{plan.target}")

    def apply_commits(self, shas: list[str]) -> None:
        # No rollback on failure: the partial branch stays local and is never pushed.
        for sha in shas:
            _stderr.print(sha)
            try:
                self.git.cherry_pick(sha)
            except GitError as exc:
                raise self.abort(
                    messages.cherry_pick_failed(shas, sha, exc.output),
                    f"Cherry-pick failed at {sha}.",
                ) from exc

    def push(self, plan: BranchPlan) -> None:
        try:
            self.git.push("upstream", plan.local_ref, plan.temp)
        except GitError as exc:
            raise self.abort(messages.push_failed(exc.output), f"Push of {plan.temp} failed.") from exc

    def publish(self, plan: BranchPlan, identity: Identity, reviewers: list[str]) -> CreatedPullRequest:
        if identity.token == self.settings.token:
            return self._publish(self.client, plan, reviewers)
        with self.client_factory(identity.token) as publisher:
            return self._publish(publisher, plan, reviewers)

    def _publish(self, client: GitHubClient, plan: BranchPlan, reviewers: list[str]) -> CreatedPullRequest:
        repo = self.event.repo_full_name
        fields = {
            "base": plan.target,
            "head": plan.temp,
            "title": self.event.title,
            "body": messages.pr_body(self.event.body),
        }
        try:
            try:
                pr = client.create_pull(repo, draft=True, **fields)
            except DraftsNotSupportedError:
                _stderr.print("[yellow]Draft pull requests are not supported here, retrying as ready for review.[/yellow]")
                pr = client.create_pull(repo, draft=False, **fields)
            client.request_reviewers(repo, pr.number, reviewers)
        except (ApiError, NetworkError) as exc:
            raise self.abort(messages.pr_creation_failed(str(exc)), "Pull request creation failed.") from exc
        return pr
