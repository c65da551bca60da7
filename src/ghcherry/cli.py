from __future__ import annotations

import os
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from . import __version__
from .client import GitHubClient
from .config import (
    DEFAULT_API_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_INTERVAL,
    DEFAULT_SERVER_URL,
    Settings,
)
from .errors import GhCherryError, TriggerError
from .event import load_event, parse_event
from .git import GitRepo
from .runner import CherryPickRun

_stderr = Console(stderr=True)


load_dotenv()


@click.group()
@click.version_option(version=__version__, prog_name="ghcherry")
def cli() -> None:
    """ghcherry: cherry-pick a merged pull request onto another branch."""


@cli.command()
@click.option(
    "--event-path",
    type=click.Path(path_type=Path),
    envvar="GITHUB_EVENT_PATH",
    required=True,
    help="Path to the JSON payload of the triggering event.",
)
@click.option(
    "--repo",
    "repository",
    metavar="OWNER/REPO",
    envvar="GITHUB_REPOSITORY",
    required=True,
    help="Repository the pull request is read from.",
)
@click.option(
    "--pr-number",
    type=click.IntRange(min=1),
    envvar="PR_NUMBER",
    default=None,
    help="Pull request number; overrides the one in the event payload.",
)
@click.option(
    "--max-retries",
    type=click.IntRange(min=1, clamp=True),
    envvar="MAX_RETRIES",
    default=DEFAULT_MAX_RETRIES,
    show_default=True,
    help="Attempts to read the pull request's merge status; values below 1 count as 1.",
)
@click.option(
    "--retry-interval",
    type=click.FloatRange(min=0, clamp=True),
    envvar="RETRY_INTERVAL",
    default=DEFAULT_RETRY_INTERVAL,
    show_default=True,
    help="Seconds to wait between attempts.",
)
@click.option(
    "--run-id",
    envvar="GITHUB_RUN_ID",
    default=None,
    help="Workflow run id, linked from the comments.",
)
@click.option(
    "--workspace",
    type=click.Path(path_type=Path, file_okay=False),
    envvar="GITHUB_WORKSPACE",
    default=".",
    show_default=True,
    help="Git checkout to cherry-pick in.",
)
@click.option("--api-url", envvar="GITHUB_API_URL", default=DEFAULT_API_URL, show_default=True)
@click.option("--server-url", envvar="GITHUB_SERVER_URL", default=DEFAULT_SERVER_URL, show_default=True)
def run(
    event_path: Path,
    repository: str,
    pr_number: int | None,
    max_retries: int,
    retry_interval: float,
    run_id: str | None,
    workspace: Path,
    api_url: str,
    server_url: str,
) -> None:
    """Cherry-pick the pull request named in the event onto the branch named in its comment."""
    owner, _, repo_name = repository.partition("/")
    if not owner or not repo_name or "/" in repo_name:
        raise click.BadParameter(
            f"{repository!r} is not a valid OWNER/REPO format.",
            param_hint="--repo",
        )

    token = os.environ.get("GITHUB_TOKEN")
    if not token:
        _stderr.print("[red]Error:[/red] Set the GITHUB_TOKEN env variable.")
        sys.exit(1)

    settings = Settings(
        token=token,
        repository=repository,
        event_path=event_path,
        pr_number=pr_number,
        max_retries=max_retries,
        retry_interval=retry_interval,
        run_id=run_id,
        api_url=api_url,
        server_url=server_url,
        workspace=workspace,
        environ=dict(os.environ),
    )

    try:
        event = parse_event(load_event(settings.event_path), settings.pr_number)
    except TriggerError as exc:
        _stderr.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    try:
        with GitHubClient(settings.token, settings.api_url) as client:
            pr = CherryPickRun(settings, event, client, GitRepo(settings.workspace)).run()
    except GhCherryError as exc:
        _stderr.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    click.echo(pr.url)
