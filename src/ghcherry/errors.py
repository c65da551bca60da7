from __future__ import annotations


class GhCherryError(Exception):
    """Base class for every error raised by ghcherry."""


class TriggerError(GhCherryError):
    """The triggering event does not identify a pull request."""


class NetworkError(GhCherryError):
    pass


class ApiError(GhCherryError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


class DraftsNotSupportedError(ApiError):
    """The target repository does not accept draft pull requests."""


class GitError(GhCherryError):
    def __init__(self, command: list[str], returncode: int, output: str) -> None:
        super().__init__(f"git {' '.join(command)} exited with status {returncode}")
        self.command = command
        self.returncode = returncode
        self.output = output


class RunAborted(GhCherryError):
    """A failure that has already been reported on the pull request."""
