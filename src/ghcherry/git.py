from __future__ import annotations

import re
import subprocess
from pathlib import Path
from urllib.parse import urlsplit

from rich.console import Console
from rich.markup import escape

from .errors import GitError

_CREDENTIALS_RE = re.compile(r"(https?://)[^/@\s]+@")
_stderr = Console(stderr=True)


def redact(text: str) -> str:
    """Hide the ``user:token@`` part of any URL in ``text``."""
    return _CREDENTIALS_RE.sub(r"\1***@", text)


def remote_url(server_url: str, login: str, token: str, repo: str) -> str:
    parts = urlsplit(server_url)
    return f"{parts.scheme}://{login}:{token}@{parts.netloc}/{repo}.git"


class GitRepo:
    """Thin wrapper around the ``git`` command line for one working tree."""

    def __init__(self, path: Path | str = ".") -> None:
        self.path = Path(path)

    def run(self, *args: str) -> str:
        command = list(args)
        _stderr.print(f"[dim]+ git {escape(redact(' '.join(command)))}[/dim]")
        result = subprocess.run(
            ["git", *command],
            cwd=self.path,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
        if result.returncode != 0:
            raise GitError(
                [redact(arg) for arg in command],
                result.returncode,
                redact(result.stdout or ""),
            )
        return result.stdout

    def add_safe_directory(self) -> None:
        # https://github.com/actions/checkout/issues/766
        self.run("config", "--global", "--add", "safe.directory", str(self.path.resolve()))

    def set_remote_url(self, remote: str, url: str) -> None:
        self.run("remote", "set-url", remote, url)

    def add_remote(self, remote: str, url: str) -> None:
        remotes = self.run("remote").split()
        if remote in remotes:
            self.set_remote_url(remote, url)
        else:
            self.run("remote", "add", remote, url)

    def set_identity(self, name: str, email: str) -> None:
        self.run("config", "--global", "user.email", email)
        self.run("config", "--global", "user.name", name)

    def fetch(self, remote: str, branch: str) -> None:
        self.run("fetch", remote, branch)

    def checkout_new_branch(self, name: str, start_point: str) -> None:
        self.run("checkout", "-b", name, start_point)

    def cherry_pick(self, sha: str) -> None:
        self.run("cherry-pick", "-x", "-s", sha)

    def push(self, remote: str, local_ref: str, remote_branch: str) -> None:
        self.run("push", remote, f"{local_ref}:{remote_branch}")
