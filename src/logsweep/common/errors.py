from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .schema import RunSummary


class LogsweepError(Exception):
    """Base for errors that end a run."""


class ConfigError(LogsweepError):
    pass


class RemoteChannelError(LogsweepError):
    """The ssh channel itself failed (host unreachable, auth refused, no ssh client)."""

    def __init__(self, host: str, detail: str) -> None:
        super().__init__(f"remote channel to {host} failed: {detail}")
        self.host = host
        self.detail = detail
        # filled in by run_cleanup with what was done before the drop
        self.summary: RunSummary | None = None
