from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

import typer

from logsweep.access.factory import pick_accessor, resolve_target
from logsweep.cleanup import run_cleanup
from logsweep.common.config import AppCfg, load_config
from logsweep.common.errors import ConfigError, LogsweepError, RemoteChannelError
from logsweep.common.log import setup_logging
from logsweep.common.schema import RetentionPolicy, RunSummary, display_path
from logsweep.fixtures import DEFAULT_AGES, seed_tree
from logsweep.report import RunParams, emit_report, render_report

app = typer.Typer(help="logsweep: age-based log retention cleanup for local or ssh hosts")

DEFAULT_CONFIG = Path("configs/logsweep.yaml")

EXIT_DELETE_FAILURES = 1
EXIT_FATAL = 2


def _load(config: Path) -> AppCfg:
    try:
        return load_config(config)
    except ConfigError as e:
        typer.secho(f"config error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_FATAL)


def _show(summary: RunSummary, params: RunParams, *, as_json: bool) -> None:
    if as_json:
        typer.echo(summary.model_dump_json(indent=2))
    else:
        emit_report(render_report(summary, params))


@app.command()
def run(
    host: str | None = typer.Option(None, "--host", "-H", help="Target host (default: localhost)."),
    root: str | None = typer.Option(None, "--root", "-r", help="Folder to clean (default: /var/log)."),
    max_age_days: int | None = typer.Option(None, "--max-age-days", "-d", min=0, help="Retention in days (default: 60)."),
    dry_run: bool | None = typer.Option(None, "--dry-run/--live", help="Report what would be deleted without deleting."),
    verbose: bool = typer.Option(True, "--verbose/--quiet", help="Append a transcript of the run to the log file."),
    config: Path = typer.Option(DEFAULT_CONFIG, "--config", "-c"),
    as_json: bool = typer.Option(False, "--json", help="Print the run summary as JSON."),
    fail_on_error: bool = typer.Option(False, "--fail-on-error", help="Exit 1 if any deletion failed."),
) -> None:
    cfg = _load(config)
    setup_logging(cfg.logging, name="logsweep", transcript=verbose)
    log = logging.getLogger("logsweep.cli")

    params = RunParams(
        host=host if host is not None else cfg.cleanup.host,
        root=root if root is not None else cfg.cleanup.root,
        max_age_days=max_age_days if max_age_days is not None else cfg.cleanup.max_age_days,
        dry_run=dry_run if dry_run is not None else cfg.cleanup.dry_run,
    )

    try:
        accessor = pick_accessor(params.host, cfg.remote)
        summary = run_cleanup(
            accessor,
            params.root,
            RetentionPolicy(max_age_days=params.max_age_days),
            dry_run=params.dry_run,
        )
    except RemoteChannelError as e:
        # deletions before the drop are irreversible; still report them
        if e.summary is not None:
            _show(e.summary, params, as_json=as_json)
        typer.secho(f"run aborted: {display_path(str(e))}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_FATAL)
    except LogsweepError as e:
        log.error("run aborted: %s", e)
        typer.secho(f"run aborted: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_FATAL)

    _show(summary, params, as_json=as_json)

    if fail_on_error and summary.failed:
        raise typer.Exit(code=EXIT_DELETE_FAILURES)


@app.command()
def seed(
    root: Path = typer.Argument(..., help="Folder to create fixture files in."),
    ages: str = typer.Option(",".join(str(a) for a in DEFAULT_AGES), "--ages", help="Comma-separated ages in days."),
    per_age: int = typer.Option(1, "--per-age", min=1),
    nested: bool = typer.Option(True, "--nested/--flat"),
) -> None:
    """Create log files with back-dated modification times for manual testing."""
    try:
        age_list = [int(a) for a in ages.split(",") if a.strip()]
        created = seed_tree(root, age_list, files_per_age=per_age, nested=nested)
    except ValueError as e:
        typer.secho(f"invalid --ages: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_FATAL)

    now = datetime.now()
    for p in created:
        age = (now - datetime.fromtimestamp(p.stat().st_mtime)).days
        print(f"  {age:>4}d  {p}")
    print(f"seeded {len(created)} files under {root}")


@app.command()
def doctor(
    host: str = typer.Option("localhost", "--host", "-H"),
    root: str = typer.Option("/var/log", "--root", "-r"),
    config: Path = typer.Option(DEFAULT_CONFIG, "--config", "-c"),
) -> None:
    cfg = _load(config)
    decision = resolve_target(host)
    print("logsweep doctor")
    print(f"  host:           {host}")
    print(f"  decision:       {decision.kind} ({decision.reason})")
    if decision.kind == "remote":
        print(f"  ssh:            {cfg.remote.ssh_binary} {' '.join(cfg.remote.ssh_options)}")
    try:
        files = pick_accessor(host, cfg.remote).list_files(root)
    except LogsweepError as e:
        print(f"  listable:       no ({display_path(str(e))})")
        raise typer.Exit(code=EXIT_FATAL)
    print(f"  root:           {display_path(root)}")
    print(f"  files found:    {len(files)}")


if __name__ == "__main__":
    app()
