from __future__ import annotations

import logging
from datetime import datetime

from logsweep.access.base import FileAccessor
from logsweep.common.errors import RemoteChannelError
from logsweep.common.schema import (
    DeletionOutcome,
    FileRecord,
    RetentionPolicy,
    RunSummary,
    Verdict,
    display_path,
)
from logsweep.retention import cutoff_for, evaluate

log = logging.getLogger("logsweep.cleanup")


def _apply(accessor: FileAccessor, rec: FileRecord, *, dry_run: bool) -> DeletionOutcome:
    if dry_run:
        return DeletionOutcome.simulated()
    res = accessor.delete_file(rec.path)
    if res.ok:
        return DeletionOutcome.deleted()
    return DeletionOutcome.failed(res.reason or "unknown error")


def _sweep(
    accessor: FileAccessor,
    root: str,
    policy: RetentionPolicy,
    summary: RunSummary,
    *,
    dry_run: bool,
    now: datetime,
) -> None:
    for path in accessor.list_files(root):
        summary.total_processed += 1

        ts = accessor.get_modified_time(path)
        if ts is None:
            log.warning("could not read modification time, skipping: %s", display_path(path))
            summary.skipped.append(path)
            continue

        rec = FileRecord(path=path, last_modified=ts)
        if evaluate(rec.last_modified, policy.max_age_days, now) is Verdict.RETAIN:
            log.debug("retained: %s (%s)", rec.display, rec.stamp)
            continue

        outcome = _apply(accessor, rec, dry_run=dry_run)
        if outcome.kind == "failed":
            log.error("delete failed: %s: %s", rec.display, display_path(outcome.reason or ""))
        else:
            log.info("%s: %s (%s)", "would delete" if dry_run else "deleted", rec.display, rec.stamp)
        summary.record(rec, outcome)


def run_cleanup(
    accessor: FileAccessor,
    root: str,
    policy: RetentionPolicy,
    *,
    dry_run: bool,
    now: datetime | None = None,
) -> RunSummary:
    """
    One sequential pass over `root`: list, date, evaluate, delete or simulate.

    `now` is read once so every file is judged against the same cutoff.
    RemoteChannelError from listing or dating propagates to the caller with
    the partial summary attached as `e.summary` (its `aborted` set).
    """
    now = now or datetime.now()
    summary = RunSummary()

    log.info(
        "cleanup: target=%s root=%s max_age_days=%d dry_run=%s cutoff=%s",
        accessor.target,
        display_path(root),
        policy.max_age_days,
        dry_run,
        cutoff_for(now, policy.max_age_days).isoformat(sep=" ", timespec="seconds"),
    )

    try:
        _sweep(accessor, root, policy, summary, dry_run=dry_run, now=now)
    except RemoteChannelError as e:
        summary.aborted = str(e)
        e.summary = summary
        log.error(
            "cleanup aborted after processed=%d deleted=%d failed=%d: %s",
            summary.total_processed,
            len(summary.deleted),
            len(summary.failed),
            display_path(str(e)),
        )
        raise

    log.info(
        "cleanup done: processed=%d %s=%d failed=%d skipped=%d",
        summary.total_processed,
        "would_delete" if dry_run else "deleted",
        len(summary.deleted),
        len(summary.failed),
        len(summary.skipped),
    )
    return summary
