from __future__ import annotations

import logging
from dataclasses import dataclass

import typer

from logsweep.common.log import TRANSCRIPT_LOGGER
from logsweep.common.schema import RunSummary, display_path

transcript = logging.getLogger(TRANSCRIPT_LOGGER)


@dataclass(frozen=True)
class ReportLine:
    text: str
    fg: str | None = None
    bold: bool = False


@dataclass(frozen=True)
class RunParams:
    host: str
    root: str
    max_age_days: int
    dry_run: bool


def render_report(summary: RunSummary, params: RunParams) -> list[ReportLine]:
    lines: list[ReportLine] = []
    mode = "DRY-RUN" if params.dry_run else "LIVE"

    lines.append(ReportLine("=" * 60, fg=typer.colors.CYAN))
    lines.append(ReportLine(f"Log retention cleanup [{mode}]", fg=typer.colors.CYAN, bold=True))
    lines.append(ReportLine(f"  host:          {display_path(params.host)}", fg=typer.colors.CYAN))
    lines.append(ReportLine(f"  root:          {display_path(params.root)}", fg=typer.colors.CYAN))
    lines.append(ReportLine(f"  max age days:  {params.max_age_days}", fg=typer.colors.CYAN))
    lines.append(ReportLine("=" * 60, fg=typer.colors.CYAN))

    if summary.aborted:
        lines.append(ReportLine(f"Run aborted: {display_path(summary.aborted)}", fg=typer.colors.RED, bold=True))
        lines.append(ReportLine("Counts below cover only the files handled before the abort.", fg=typer.colors.RED))
    elif summary.total_processed == 0:
        lines.append(ReportLine(f"No files found under {display_path(params.root)}", fg=typer.colors.YELLOW))

    lines.append(ReportLine(f"Total files processed: {summary.total_processed}"))

    label = "Files that would be deleted" if params.dry_run else "Files deleted"
    lines.append(ReportLine(f"{label}: {len(summary.deleted)}", fg=typer.colors.GREEN, bold=True))
    for rec in summary.deleted:
        lines.append(ReportLine(f"  {rec.stamp}  {rec.display}", fg=typer.colors.GREEN))

    if summary.skipped:
        lines.append(ReportLine(f"Files skipped (date unreadable): {len(summary.skipped)}", fg=typer.colors.YELLOW))

    if not params.dry_run:
        lines.append(ReportLine(f"Failed deletions: {len(summary.failed)}", fg=typer.colors.RED, bold=True))
        for f in summary.failed:
            lines.append(ReportLine(f"  {f.display}: {display_path(f.reason)}", fg=typer.colors.RED))

    return lines


def emit_report(lines: list[ReportLine]) -> None:
    for ln in lines:
        typer.secho(ln.text, fg=ln.fg, bold=ln.bold)
        transcript.info(ln.text)
