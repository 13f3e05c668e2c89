from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from .base import DeleteResult, FileAccessor

log = logging.getLogger("logsweep.access.local")


class LocalAccessor(FileAccessor):
    target = "localhost"

    def list_files(self, root: str) -> list[str]:
        """
        Regular files under root, recursively, sorted by path.
        Missing or unreadable roots give an empty list (the run then reports
        "no files found"); unreadable subfolders are skipped.
        """
        base = Path(root)
        if not base.is_dir():
            log.debug("list_files: %s is not a readable directory", base)
            return []

        def _onerror(e: OSError) -> None:
            log.debug("list_files: skipping %s: %s", e.filename, e.strerror)

        out: list[str] = []
        for dirpath, _dirnames, filenames in os.walk(base, onerror=_onerror):
            for fn in filenames:
                p = Path(dirpath) / fn
                if p.is_file() and not p.is_symlink():
                    out.append(str(p))
        return sorted(out)

    def get_modified_time(self, path: str) -> datetime | None:
        try:
            return datetime.fromtimestamp(os.stat(path).st_mtime)
        except OSError as e:
            log.debug("stat failed for %s: %s", path, e)
            return None

    def delete_file(self, path: str) -> DeleteResult:
        try:
            os.remove(path)
        except OSError as e:
            return DeleteResult(ok=False, reason=f"{type(e).__name__}: {e.strerror or e}")
        return DeleteResult(ok=True)
