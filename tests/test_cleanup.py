from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from logsweep.access.local import LocalAccessor
from logsweep.cleanup import run_cleanup
from logsweep.common.errors import RemoteChannelError
from logsweep.common.schema import RetentionPolicy

from conftest import FakeAccessor, make_file

POLICY = RetentionPolicy(max_age_days=60)


def test_scenario_a_live_deletes_old_file(tmp_path: Path, now: datetime) -> None:
    f = make_file(tmp_path / "old.log", 90, now)
    s = run_cleanup(LocalAccessor(), str(tmp_path), POLICY, dry_run=False, now=now)

    assert [r.path for r in s.deleted] == [str(f)]
    assert s.failed == []
    assert not f.exists()


def test_scenario_b_recent_file_kept(tmp_path: Path, now: datetime) -> None:
    f = make_file(tmp_path / "recent.log", 30, now)
    for dry_run in (True, False):
        s = run_cleanup(LocalAccessor(), str(tmp_path), POLICY, dry_run=dry_run, now=now)
        assert s.total_processed == 1
        assert s.deleted == [] and s.failed == []
    assert f.exists()


def test_scenario_c_empty_root(tmp_path: Path, now: datetime) -> None:
    s = run_cleanup(LocalAccessor(), str(tmp_path), POLICY, dry_run=False, now=now)
    assert s.total_processed == 0
    assert s.deleted == [] and s.failed == [] and s.skipped == []


def test_missing_root_is_not_an_error(tmp_path: Path, now: datetime) -> None:
    s = run_cleanup(LocalAccessor(), str(tmp_path / "nope"), POLICY, dry_run=False, now=now)
    assert s.total_processed == 0


def test_scenario_d_dry_run_reports_but_keeps_file(tmp_path: Path, now: datetime) -> None:
    f = make_file(tmp_path / "old.log", 90, now)
    original = datetime.fromtimestamp(f.stat().st_mtime)

    s = run_cleanup(LocalAccessor(), str(tmp_path), POLICY, dry_run=True, now=now)

    assert len(s.deleted) == 1
    assert s.deleted[0].path == str(f)
    assert s.deleted[0].last_modified == original
    assert f.exists()


def test_scenario_e_delete_failure_is_recorded(now: datetime) -> None:
    acc = FakeAccessor(
        {"/logs/locked.log": now - timedelta(days=90), "/logs/other.log": now - timedelta(days=90)},
        fail={"/logs/locked.log": "PermissionError: Permission denied"},
    )
    s = run_cleanup(acc, "/logs", POLICY, dry_run=False, now=now)

    assert [f.path for f in s.failed] == ["/logs/locked.log"]
    assert s.failed[0].reason == "PermissionError: Permission denied"
    assert [r.path for r in s.deleted] == ["/logs/other.log"]
    assert "/logs/locked.log" in acc.files


def test_dry_run_never_calls_delete(now: datetime) -> None:
    acc = FakeAccessor({f"/l/{i}.log": now - timedelta(days=100 + i) for i in range(5)})
    s = run_cleanup(acc, "/l", POLICY, dry_run=True, now=now)
    assert acc.delete_calls == []
    assert len(s.deleted) == 5


def test_live_deletes_each_expired_file_once(now: datetime) -> None:
    files = {
        "/l/a.log": now - timedelta(days=90),
        "/l/b.log": now - timedelta(days=10),
        "/l/c.log": now - timedelta(days=61),
    }
    acc = FakeAccessor(files)
    run_cleanup(acc, "/l", POLICY, dry_run=False, now=now)
    assert acc.delete_calls == ["/l/a.log", "/l/c.log"]


def test_undated_files_are_skipped_not_failed(now: datetime) -> None:
    acc = FakeAccessor({"/l/gone.log": None, "/l/old.log": now - timedelta(days=90)})
    s = run_cleanup(acc, "/l", POLICY, dry_run=False, now=now)

    assert s.total_processed == 2
    assert s.skipped == ["/l/gone.log"]
    assert [r.path for r in s.deleted] == ["/l/old.log"]
    assert s.failed == []
    assert "/l/gone.log" not in acc.delete_calls


def test_buckets_are_disjoint(now: datetime) -> None:
    files = {f"/l/{i}.log": now - timedelta(days=50 + 10 * i) for i in range(6)}
    acc = FakeAccessor(files, fail={"/l/3.log": "busy", "/l/5.log": "busy"})
    s = run_cleanup(acc, "/l", POLICY, dry_run=False, now=now)

    deleted = {r.path for r in s.deleted}
    failed = {f.path for f in s.failed}
    assert deleted.isdisjoint(failed)
    assert s.total_processed >= len(deleted) + len(failed)


def test_second_run_finds_nothing_left_to_delete(tmp_path: Path, now: datetime) -> None:
    make_file(tmp_path / "a.log", 90, now)
    make_file(tmp_path / "sub" / "b.log", 120, now)
    make_file(tmp_path / "c.log", 5, now)

    first = run_cleanup(LocalAccessor(), str(tmp_path), POLICY, dry_run=False, now=now)
    second = run_cleanup(LocalAccessor(), str(tmp_path), POLICY, dry_run=False, now=now)

    assert len(first.deleted) == 2
    assert second.deleted == []
    assert second.total_processed == 1


def test_channel_error_while_listing_propagates(now: datetime) -> None:
    class Down(FakeAccessor):
        def list_files(self, root: str) -> list[str]:
            raise RemoteChannelError("box", "Connection refused")

    with pytest.raises(RemoteChannelError):
        run_cleanup(Down({}), "/l", POLICY, dry_run=False, now=now)


def test_negative_policy_rejected() -> None:
    with pytest.raises(ValidationError):
        RetentionPolicy(max_age_days=-1)


def test_channel_drop_while_dating_keeps_partial_summary(now: datetime) -> None:
    class DropsAfterFirst(FakeAccessor):
        def get_modified_time(self, path: str) -> datetime | None:
            if path == "/l/b.log":
                raise RemoteChannelError("box", "Broken pipe")
            return super().get_modified_time(path)

    old = now - timedelta(days=90)
    acc = DropsAfterFirst({"/l/a.log": old, "/l/b.log": old, "/l/c.log": old})

    with pytest.raises(RemoteChannelError) as ei:
        run_cleanup(acc, "/l", POLICY, dry_run=False, now=now)

    partial = ei.value.summary
    assert partial is not None
    assert [r.path for r in partial.deleted] == ["/l/a.log"]
    assert partial.total_processed == 2
    assert partial.aborted is not None and "Broken pipe" in partial.aborted
    assert acc.delete_calls == ["/l/a.log"]


def test_channel_drop_while_listing_attaches_empty_summary(now: datetime) -> None:
    class Down(FakeAccessor):
        def list_files(self, root: str) -> list[str]:
            raise RemoteChannelError("box", "Connection refused")

    with pytest.raises(RemoteChannelError) as ei:
        run_cleanup(Down({}), "/l", POLICY, dry_run=False, now=now)
    assert ei.value.summary is not None
    assert ei.value.summary.total_processed == 0
