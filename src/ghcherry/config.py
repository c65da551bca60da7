from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_MAX_RETRIES = 6
DEFAULT_RETRY_INTERVAL = 10


@dataclass(frozen=True)
class Settings:
    """Everything a run needs, gathered once by the CLI and passed to each stage."""

    token: str = field(repr=False)
    repository: str
    event_path: Path
    pr_number: int | None = None
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_interval: float = DEFAULT_RETRY_INTERVAL
    run_id: str | None = None
    api_url: str = DEFAULT_API_URL
    server_url: str = DEFAULT_SERVER_URL
    workspace: Path = Path(".")
    environ: Mapping[str, str] = field(default_factory=dict, repr=False)

    def run_url(self, repo: str) -> str:
        return f"{self.server_url.rstrip('/')}/{repo}/actions/runs/{self.run_id or ''}"
