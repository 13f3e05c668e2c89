from __future__ import annotations

import os
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from logsweep.access.base import DeleteResult, FileAccessor

NOW = datetime(2026, 3, 1, 12, 0, 0)


def make_file(path: Path, age_days: float, now: datetime = NOW) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x", encoding="utf-8")
    ts = (now - timedelta(days=age_days)).timestamp()
    os.utime(path, (ts, ts))
    return path


class FakeAccessor(FileAccessor):
    """In-memory accessor; records every delete call."""

    target = "fake"

    def __init__(self, files: dict[str, datetime | None], fail: dict[str, str] | None = None) -> None:
        self.files = dict(files)
        self.fail = fail or {}
        self.delete_calls: list[str] = []

    def list_files(self, root: str) -> list[str]:
        return list(self.files)

    def get_modified_time(self, path: str) -> datetime | None:
        return self.files.get(path)

    def delete_file(self, path: str) -> DeleteResult:
        self.delete_calls.append(path)
        if path in self.fail:
            return DeleteResult(ok=False, reason=self.fail[path])
        self.files.pop(path, None)
        return DeleteResult(ok=True)


@pytest.fixture
def now() -> datetime:
    return NOW
