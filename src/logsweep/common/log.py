from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import LoggingCfg

TRANSCRIPT_LOGGER = "logsweep.transcript"


def setup_logging(cfg: LoggingCfg, name: str, *, transcript: bool = True) -> logging.Logger:
    """
    Console logging always; the rotating file is the run transcript and is
    only attached when `transcript` is set. It appends across runs.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, cfg.level))

    # report lines go to stdout via typer; this logger only feeds the file
    tl = logging.getLogger(TRANSCRIPT_LOGGER)
    tl.propagate = False
    tl.setLevel(logging.INFO)

    _drop_own_handlers(root, tl)

    fmt = logging.Formatter(
        fmt="%(asctime)sZ %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    sh._logsweep = True  # type: ignore[attr-defined]
    root.addHandler(sh)

    if transcript:
        cfg.dir.mkdir(parents=True, exist_ok=True)
        log_path = Path(cfg.dir) / f"{name}.log"
        fh = RotatingFileHandler(
            log_path,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backups,
            encoding="utf-8",
        )
        fh.setFormatter(fmt)
        fh._logsweep = True  # type: ignore[attr-defined]
        root.addHandler(fh)
        tl.addHandler(fh)

    return logging.getLogger(name)


def _drop_own_handlers(*loggers: logging.Logger) -> None:
    # repeated setup in one process (CLI tests) must not stack handlers
    for lg in loggers:
        for h in list(lg.handlers):
            if getattr(h, "_logsweep", False):
                lg.removeHandler(h)
                h.close()
