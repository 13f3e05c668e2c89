from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer

TIMESTAMP_FMT = "%Y-%m-%d %H:%M:%S"


def display_path(path: str) -> str:
    """
    Printable form of a path. Names that are not valid UTF-8 arrive as
    surrogate-escaped str; those bytes become U+FFFD. Only for output,
    never for file operations.
    """
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


class Verdict(str, Enum):
    RETAIN = "retain"
    EXPIRE = "expire"


class FileRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    last_modified: datetime

    @property
    def stamp(self) -> str:
        return self.last_modified.strftime(TIMESTAMP_FMT)

    @property
    def display(self) -> str:
        return display_path(self.path)

    @field_serializer("path")
    def _ser_path(self, path: str) -> str:
        return display_path(path)


class RetentionPolicy(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_age_days: int = Field(ge=0)


class DeletionOutcome(BaseModel):
    """What happened to one expired file."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["simulated", "deleted", "failed"]
    reason: str | None = None

    @classmethod
    def simulated(cls) -> "DeletionOutcome":
        return cls(kind="simulated")

    @classmethod
    def deleted(cls) -> "DeletionOutcome":
        return cls(kind="deleted")

    @classmethod
    def failed(cls, reason: str) -> "DeletionOutcome":
        return cls(kind="failed", reason=reason)


class FailedDeletion(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    reason: str

    @property
    def display(self) -> str:
        return display_path(self.path)

    @field_serializer("path", "reason")
    def _ser_text(self, value: str) -> str:
        # rm's stderr echoes the raw name back
        return display_path(value)


class RunSummary(BaseModel):
    """
    Accumulated result of one cleanup run.

    NOTE:
    - `deleted` holds would-delete entries in dry-run mode.
    - `skipped` lists files whose timestamp could not be read; they are
      counted in total_processed but are not failures.
    - `aborted` is set when the remote channel dropped mid-run; the buckets
      then hold what happened before the drop.
    """

    total_processed: int = 0
    deleted: list[FileRecord] = Field(default_factory=list)
    failed: list[FailedDeletion] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    aborted: str | None = None

    @field_serializer("skipped")
    def _ser_skipped(self, skipped: list[str]) -> list[str]:
        return [display_path(p) for p in skipped]

    @field_serializer("aborted")
    def _ser_aborted(self, aborted: str | None) -> str | None:
        return display_path(aborted) if aborted is not None else None

    def record(self, rec: FileRecord, outcome: DeletionOutcome) -> None:
        if outcome.kind == "failed":
            self.failed.append(FailedDeletion(path=rec.path, reason=outcome.reason or "unknown error"))
        else:
            self.deleted.append(rec)
