from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable

log = logging.getLogger("logsweep.fixtures")

DEFAULT_AGES: tuple[int, ...] = (1, 15, 30, 59, 61, 90, 120, 365)


def seed_tree(
    root: Path,
    ages_days: Iterable[int] = DEFAULT_AGES,
    *,
    now: datetime | None = None,
    files_per_age: int = 1,
    nested: bool = True,
) -> list[Path]:
    """
    Create app_<age>d_<n>.log files under root with mtime forced to now - age.
    With nested=True every odd-numbered file goes into root/nested/ so the
    recursive listing gets exercised.
    """
    now = now or datetime.now()
    root.mkdir(parents=True, exist_ok=True)
    if nested:
        (root / "nested").mkdir(exist_ok=True)

    created: list[Path] = []
    for age in ages_days:
        if age < 0:
            raise ValueError(f"age must be >= 0, got {age}")
        stamp = (now - timedelta(days=age)).timestamp()
        for n in range(files_per_age):
            folder = root / "nested" if nested and n % 2 == 1 else root
            p = folder / f"app_{age}d_{n}.log"
            p.write_text(f"fixture aged {age} days\n", encoding="utf-8")
            os.utime(p, (stamp, stamp))
            created.append(p)

    log.info("seeded %d files under %s", len(created), root)
    return created
