from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError


class LoggingCfg(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    dir: Path = Path("./var/log")
    max_bytes: int = 5_000_000
    backups: int = 3


class CleanupCfg(BaseModel):
    host: str = "localhost"
    root: str = "/var/log"
    max_age_days: int = Field(default=60, ge=0)
    dry_run: bool = False


class RemoteCfg(BaseModel):
    ssh_binary: str = "ssh"
    # BatchMode keeps ssh from prompting for a password and blocking the run
    ssh_options: list[str] = Field(default_factory=lambda: ["-o", "BatchMode=yes"])
    user: str | None = None


class AppCfg(BaseModel):
    logging: LoggingCfg = Field(default_factory=LoggingCfg)
    cleanup: CleanupCfg = Field(default_factory=CleanupCfg)
    remote: RemoteCfg = Field(default_factory=RemoteCfg)


def load_config(path: Path | None) -> AppCfg:
    data: dict[str, Any] = {}
    if path is not None and path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"cannot parse {path}: {e}") from e
    try:
        return AppCfg.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e
