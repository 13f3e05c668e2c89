from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from logsweep.common.schema import Verdict
from logsweep.retention import cutoff_for, evaluate


def test_older_than_cutoff_expires(now: datetime) -> None:
    assert evaluate(now - timedelta(days=90), 60, now) is Verdict.EXPIRE


def test_newer_than_cutoff_retained(now: datetime) -> None:
    assert evaluate(now - timedelta(days=30), 60, now) is Verdict.RETAIN


def test_exactly_at_cutoff_is_retained(now: datetime) -> None:
    assert evaluate(cutoff_for(now, 60), 60, now) is Verdict.RETAIN
    assert evaluate(cutoff_for(now, 60) - timedelta(microseconds=1), 60, now) is Verdict.EXPIRE


def test_zero_days_expires_anything_in_the_past(now: datetime) -> None:
    assert evaluate(now - timedelta(seconds=1), 0, now) is Verdict.EXPIRE
    assert evaluate(now, 0, now) is Verdict.RETAIN


def test_future_timestamp_retained(now: datetime) -> None:
    assert evaluate(now + timedelta(days=3), 60, now) is Verdict.RETAIN


def test_negative_days_rejected(now: datetime) -> None:
    with pytest.raises(ValueError):
        cutoff_for(now, -1)
