"""Parse ``git blame --line-porcelain`` (or ``--porcelain``) output.

Each block looks like::

    <sha> <orig-line> <final-line> [<count>]
    author <name>
    author-mail <email>
    author-time <unix seconds>
    author-tz <offset>
    committer ...
    summary <first line of message>
    [previous <sha> <filename>]
    [boundary]
    filename <filename>
    \t<content>

Parsing is lenient: lines that fit nowhere are skipped.
"""

from __future__ import annotations

import re
from typing import Any

import structlog

from git_spotlight.models import UNCOMMITTED_COMMIT_ID, BlameLine, BlameReport

log = structlog.get_logger()

HEADER_RE = re.compile(r"^([0-9a-f]{40})\s+(\d+)\s+(\d+)(?:\s+(\d+))?$")
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

NOT_COMMITTED_AUTHOR = "Not Committed Yet"

# Fields that belong to the commit and are shared by all of its blocks.
COMMIT_FIELDS = ("author", "author_mail", "author_timestamp", "author_timezone", "summary")


def _parse_int(text: str) -> int:
    match = LEADING_INT_RE.match(text)
    if not match:
        return 0
    return int(match.group(1))


def _is_uncommitted(commit_id: str, author: str) -> bool:
    if commit_id == UNCOMMITTED_COMMIT_ID:
        return True
    return author == NOT_COMMITTED_AUTHOR or "not committed" in author.lower()


def _apply_metadata(fields: dict[str, Any], line: str) -> None:
    if line.startswith("author "):
        fields["author"] = line[7:]
        fields["has_author"] = True
    elif line.startswith("author-mail "):
        fields["author_mail"] = line[12:]
    elif line.startswith("author-time "):
        fields["author_timestamp"] = _parse_int(line[12:])
    elif line.startswith("author-tz "):
        fields["author_timezone"] = line[10:]
    elif line.startswith("summary "):
        fields["summary"] = line[8:]
    elif line.startswith("filename "):
        fields["filename"] = line[9:]
    elif line.startswith("previous "):
        previous_id, _, previous_name = line[9:].partition(" ")
        fields["previous_commit_id"] = previous_id
        fields["previous_filename"] = previous_name or None
    elif line == "boundary":
        fields["is_boundary"] = True
    # committer-* and unknown keys are ignored


def _scan(raw_lines: list[str]) -> dict[int, BlameLine]:
    lines: dict[int, BlameLine] = {}
    commit_metadata: dict[str, dict[str, Any]] = {}
    index = 0
    total = len(raw_lines)

    while index < total:
        line = raw_lines[index]
        index += 1

        if not line.strip():
            continue

        header = HEADER_RE.match(line)
        if not header:
            # content line of an already closed block, or noise
            continue

        commit_id = header.group(1)
        fields: dict[str, Any] = {
            "commit_id": commit_id,
            "original_line_number": int(header.group(2)),
            "line_number": int(header.group(3)),
        }

        while index < total:
            meta = raw_lines[index]
            if meta.startswith("\t"):
                index += 1
                break
            if HEADER_RE.match(meta):
                # truncated block: the next header starts a new one
                break
            _apply_metadata(fields, meta)
            index += 1

        if fields.pop("has_author", False):
            commit_metadata[commit_id] = {key: fields.get(key) for key in COMMIT_FIELDS if key in fields}
        elif commit_id in commit_metadata:
            # plain --porcelain only describes a commit the first time it appears
            for key, value in commit_metadata[commit_id].items():
                fields.setdefault(key, value)

        fields["is_uncommitted"] = _is_uncommitted(commit_id, fields.get("author", ""))
        if fields["line_number"] < 1:
            log.debug("blame_block_skipped", reason="line number below 1", commit_id=commit_id)
            continue

        record = BlameLine(**fields)
        lines[record.line_number] = record

    return lines


def parse_blame_report(raw: str) -> BlameReport:
    """Parse raw blame output into a ``BlameReport``.

    Args:
        raw: Text produced by ``git blame --line-porcelain`` or ``--porcelain``.

    Returns:
        A successful report for any input that can be scanned (empty input
        gives zero lines). Only an unexpected error during scanning yields
        ``success=False`` with an error message and no lines.
    """
    if not raw or not raw.strip():
        return BlameReport(success=True, lines={}, line_count=0)

    try:
        raw_lines = [line[:-1] if line.endswith("\r") else line for line in raw.split("\n")]
        lines = _scan(raw_lines)
    except Exception as exc:
        log.warning("blame_parse_failed", error=str(exc), exc_info=True)
        return BlameReport(
            success=False,
            lines={},
            line_count=0,
            error=f"Failed to parse blame output: {exc}",
        )

    return BlameReport(success=True, lines=lines, line_count=len(lines))


def lines_since(report: BlameReport, cutoff_ms: int) -> list[int]:
    """Committed line numbers authored at or after ``cutoff_ms`` (epoch milliseconds)."""
    cutoff_seconds = cutoff_ms / 1000
    return sorted(
        number
        for number, info in report.lines.items()
        if not info.is_uncommitted and info.author_timestamp >= cutoff_seconds
    )


def uncommitted_lines(report: BlameReport) -> list[int]:
    return sorted(number for number, info in report.lines.items() if info.is_uncommitted)
