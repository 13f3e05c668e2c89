from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DeleteResult:
    ok: bool
    reason: str | None = None


class FileAccessor(ABC):
    """Operation surface over one target host: list, stat, delete."""

    target: str

    @abstractmethod
    def list_files(self, root: str) -> list[str]: ...

    @abstractmethod
    def get_modified_time(self, path: str) -> datetime | None: ...

    @abstractmethod
    def delete_file(self, path: str) -> DeleteResult: ...
