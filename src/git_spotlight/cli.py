"""Typer-based CLI for inspecting blame reports produced by ``git blame --line-porcelain``."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer

from git_spotlight.classifier import Highlighter
from git_spotlight.colors import color_for, contrasting_text_color
from git_spotlight.config import Settings, load_settings
from git_spotlight.diff import parse_added_lines
from git_spotlight.errors import ConfigError, InvalidDurationError, ReportSourceError
from git_spotlight.heatmap import age_bracket, bucketize, calculate_heatmap
from git_spotlight.links import commit_url
from git_spotlight.logging import configure_logging
from git_spotlight.models import (
    AgeMode,
    AuthorMode,
    BlameReport,
    BranchDiffMode,
    CommitMode,
    HeatmapMode,
    HighlightMode,
    NoHighlight,
    SpecificAuthorMode,
    SpecificCommitMode,
)
from git_spotlight.parser import parse_blame_report
from git_spotlight.stats import compute_file_statistics
from git_spotlight.timeparse import format_timestamp, parse_duration, relative_time

app = typer.Typer(add_completion=False, help="git-spotlight: per-line provenance from git blame reports")

MODE_NAMES = (
    "none",
    "age",
    "author",
    "commit",
    "heatmap",
    "specific-author",
    "specific-commit",
    "branch-diff",
)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def _echo_json(payload: Any) -> None:
    """Print a JSON document to stdout."""
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _read_text(source: str) -> str:
    """Read a report or diff from a file path, or from stdin when ``source`` is ``-``."""
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReportSourceError(source, str(exc)) from exc


def _load_report(source: str) -> BlameReport:
    """Read and parse a blame report, rejecting reports that fail to parse."""
    try:
        text = _read_text(source)
    except ReportSourceError as exc:
        raise typer.BadParameter(str(exc)) from exc

    report = parse_blame_report(text)
    if not report.success:
        raise typer.BadParameter(report.error or "Blame report could not be parsed")
    return report


def _build_mode(
    mode: str,
    *,
    since: str | None,
    author: str | None,
    commit: str | None,
    diff: str | None,
    buckets: int,
    settings: Settings,
) -> HighlightMode:
    if mode == "none":
        return NoHighlight()
    if mode == "age":
        try:
            cutoff = parse_duration(since or settings.duration)
        except InvalidDurationError as exc:
            raise typer.BadParameter(str(exc), param_hint="--since") from exc
        return AgeMode(cutoff_ms=cutoff.cutoff_ms)
    if mode == "author":
        return AuthorMode()
    if mode == "commit":
        return CommitMode()
    if mode == "heatmap":
        return HeatmapMode(bucket_count=buckets)
    if mode == "specific-author":
        return SpecificAuthorMode(author=author)
    if mode == "specific-commit":
        return SpecificCommitMode(commit=commit)
    if mode == "branch-diff":
        if diff is None:
            return BranchDiffMode()
        try:
            return BranchDiffMode(added_lines=parse_added_lines(_read_text(diff)))
        except ReportSourceError as exc:
            raise typer.BadParameter(str(exc), param_hint="--diff") from exc
    raise typer.BadParameter(f"Unknown mode {mode!r}. Choose from: {', '.join(MODE_NAMES)}", param_hint="--mode")


@app.callback()
def main(
    ctx: typer.Context,
    log_level: str | None = typer.Option(None, "--log-level", help="Override GIT_SPOTLIGHT__LOGGING__LEVEL"),
) -> None:
    """Load settings and configure logging for every command."""
    overrides: dict[str, Any] = {}
    if log_level:
        overrides["logging"] = {"level": log_level.upper()}
    try:
        settings = load_settings(**overrides)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc

    configure_logging(level=settings.logging.level, json_format=settings.logging.json_format)
    ctx.obj = {"settings": settings}


@app.command("parse")
def parse(
    report_path: str = typer.Argument(..., help="Blame report file, or - for stdin"),
    show_lines: bool = typer.Option(False, "--lines", help="Include every parsed line record"),
) -> None:
    """Parse a blame report and print a summary."""
    report = _load_report(report_path)
    lines = report.sorted_lines()
    payload: dict[str, Any] = {
        "success": report.success,
        "line_count": report.line_count,
        "uncommitted": sum(1 for info in lines if info.is_uncommitted),
        "commits": len({info.commit_id for info in lines if not info.is_uncommitted}),
        "authors": sorted({info.author for info in lines if not info.is_uncommitted}),
    }
    if show_lines:
        payload["lines"] = [info.model_dump(mode="json") for info in lines]
    _echo_json(payload)


@app.command("highlight")
def highlight(
    ctx: typer.Context,
    report_path: str = typer.Argument(..., help="Blame report file, or - for stdin"),
    mode: str = typer.Option("age", "--mode", help=f"One of: {', '.join(MODE_NAMES)}"),
    since: str | None = typer.Option(None, help="Age window such as 7d, 3m or 2024-01-15 (default from settings)"),
    author: str | None = typer.Option(None, help="Author for specific-author mode"),
    commit: str | None = typer.Option(None, help="Commit id or prefix for specific-commit mode"),
    diff: str | None = typer.Option(None, help="Unified diff file (or -) for branch-diff mode"),
    buckets: int = typer.Option(20, min=1, help="Heatmap bucket count"),
    line: int | None = typer.Option(None, min=1, help="Also report next/previous highlight from this line"),
) -> None:
    """Classify lines for one highlight mode and print groups plus navigation."""
    settings = _settings(ctx)
    report = _load_report(report_path)
    selected = _build_mode(
        mode,
        since=since,
        author=author,
        commit=commit,
        diff=diff,
        buckets=buckets,
        settings=settings,
    )

    highlighter = Highlighter(settings)
    result = highlighter.apply(report, selected)
    payload = result.model_dump(mode="json")
    if line is not None:
        payload["next"] = highlighter.navigate_next(line)
        payload["previous"] = highlighter.navigate_previous(line)
    _echo_json(payload)


@app.command("heatmap")
def heatmap(
    ctx: typer.Context,
    report_path: str = typer.Argument(..., help="Blame report file, or - for stdin"),
    buckets: int = typer.Option(20, min=1, help="Number of color buckets"),
) -> None:
    """Print per-line age ratios and the bucketed heatmap colors."""
    tone = _settings(ctx).heatmap_tone()
    report = _load_report(report_path)
    data = calculate_heatmap(report, tone)
    grouped = bucketize(data, buckets, tone)
    _echo_json(
        {
            "lines": [
                {**entry.model_dump(mode="json"), "bracket": age_bracket(entry.age_ratio)} for entry in data
            ],
            "buckets": [bucket.model_dump(mode="json") for _, bucket in sorted(grouped.items())],
        }
    )


@app.command("stats")
def stats(
    report_path: str = typer.Argument(..., help="Blame report file, or - for stdin"),
    file_path: str | None = typer.Option(None, "--file", help="Name to report for the blamed file"),
    remote_url: str | None = typer.Option(None, "--remote-url", help="Remote URL used to build commit links"),
) -> None:
    """Print authorship and age statistics for the blamed file."""
    report = _load_report(report_path)
    summary = compute_file_statistics(file_path or report_path, report, remote_url=remote_url)
    payload = summary.model_dump(mode="json")
    for entry in payload["recent_commits"]:
        if entry["timestamp"] > 0:
            entry["date"] = format_timestamp(entry["timestamp"])
            entry["relative_time"] = relative_time(entry["timestamp"])
        if remote_url:
            entry["url"] = commit_url(remote_url, entry["commit_id"])
    _echo_json(payload)


@app.command("color")
def color(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Author name, commit id, or any other key"),
) -> None:
    """Print the stable color assigned to an identifier."""
    tone = _settings(ctx).highlight
    value = color_for(identifier, tone.color_saturation, tone.color_lightness, tone.color_opacity)
    _echo_json({"identifier": identifier, "color": value, "text_color": contrasting_text_color(value)})


@app.command("link")
def link(
    remote_url: str = typer.Argument(..., help="Remote URL, e.g. git@github.com:owner/repo.git"),
    commit_id: str = typer.Argument(..., help="Full commit id"),
) -> None:
    """Print the web URL of a commit, if the host is recognized."""
    url = commit_url(remote_url, commit_id)
    if url is None:
        raise typer.BadParameter(f"Unsupported remote: {remote_url}")
    typer.echo(url)


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Print the effective settings after env var overrides."""
    _echo_json(_settings(ctx).model_dump(mode="json"))


if __name__ == "__main__":
    app()
