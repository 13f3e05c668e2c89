from __future__ import annotations

from datetime import datetime, timedelta

from logsweep.common.schema import Verdict


def cutoff_for(now: datetime, max_age_days: int) -> datetime:
    if max_age_days < 0:
        raise ValueError(f"max_age_days must be >= 0, got {max_age_days}")
    return now - timedelta(days=max_age_days)


def evaluate(last_modified: datetime, max_age_days: int, now: datetime) -> Verdict:
    # strict: a file stamped exactly at the cutoff is kept
    if last_modified < cutoff_for(now, max_age_days):
        return Verdict.EXPIRE
    return Verdict.RETAIN
