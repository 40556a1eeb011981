"""Turn parsed blame data into highlight groups and a navigation order."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Callable, Sequence
from typing import Any

import structlog
from pydantic import TypeAdapter

from git_spotlight.colors import color_for, distinct_colors_for
from git_spotlight.config import HighlightSettings, Settings
from git_spotlight.heatmap import bucketize, calculate_heatmap
from git_spotlight.models import (
    AgeMode,
    AuthorMode,
    BlameLine,
    BlameReport,
    BranchDiffMode,
    Classification,
    CommitMode,
    HeatmapMode,
    HighlightGroup,
    HighlightMode,
    NoHighlight,
    SpecificAuthorMode,
    SpecificCommitMode,
)
from git_spotlight.parser import lines_since, uncommitted_lines

log = structlog.get_logger()

# Modes that show uncommitted lines as a separate layer when enabled.
LAYERED_MODES = frozenset({"age", "author", "commit", "heatmap"})

_MODE_ADAPTER: TypeAdapter[Any] = TypeAdapter(HighlightMode)


def parse_mode(data: dict[str, Any]) -> HighlightMode:
    """Validate a ``{"kind": ..., ...}`` mapping into a mode model."""
    return _MODE_ADAPTER.validate_python(data)


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _group_by(
    report: BlameReport,
    key_of: Callable[[BlameLine], str],
    prefix: str,
    highlight: HighlightSettings,
) -> dict[str, HighlightGroup]:
    grouped: dict[str, list[int]] = {}
    for info in report.sorted_lines():
        if info.is_uncommitted:
            continue
        grouped.setdefault(key_of(info), []).append(info.line_number)

    if highlight.distinct_palette:
        colors = distinct_colors_for(grouped, highlight.color_opacity)
    else:
        colors = {
            identifier: color_for(
                identifier,
                highlight.color_saturation,
                highlight.color_lightness,
                highlight.color_opacity,
            )
            for identifier in grouped
        }

    return {
        f"{prefix}:{identifier}": HighlightGroup(
            key=f"{prefix}:{identifier}",
            label=identifier,
            color=colors[identifier],
            line_numbers=lines,
        )
        for identifier, lines in grouped.items()
    }


def _single_group(key: str, label: str, color: str, lines: list[int]) -> dict[str, HighlightGroup]:
    if not lines:
        return {}
    return {key: HighlightGroup(key=key, label=label, color=color, line_numbers=lines)}


def _matching_lines(report: BlameReport, matches: Callable[[BlameLine], bool]) -> list[int]:
    return [info.line_number for info in report.sorted_lines() if matches(info)]


def _missing_parameter(mode: HighlightMode) -> bool:
    if isinstance(mode, AgeMode):
        return mode.cutoff_ms is None
    if isinstance(mode, SpecificAuthorMode):
        return _blank(mode.author)
    if isinstance(mode, SpecificCommitMode):
        return _blank(mode.commit)
    if isinstance(mode, BranchDiffMode):
        return mode.added_lines is None
    return False


def _mode_groups(report: BlameReport, mode: HighlightMode, settings: Settings) -> dict[str, HighlightGroup]:
    highlight = settings.highlight

    if isinstance(mode, AgeMode):
        return _single_group("recent", "Recent", highlight.age_highlight_color, lines_since(report, mode.cutoff_ms))

    if isinstance(mode, AuthorMode):
        return _group_by(report, lambda info: info.author, "author", highlight)

    if isinstance(mode, CommitMode):
        return _group_by(report, lambda info: info.commit_id, "commit", highlight)

    if isinstance(mode, SpecificAuthorMode):
        target = mode.author.strip().lower()
        lines = _matching_lines(report, lambda info: info.author.lower() == target)
        return _single_group("selected", mode.author, highlight.selected_highlight_color, lines)

    if isinstance(mode, SpecificCommitMode):
        prefix = mode.commit.strip()
        lines = _matching_lines(report, lambda info: info.commit_id.startswith(prefix))
        return _single_group("selected", prefix, highlight.selected_highlight_color, lines)

    if isinstance(mode, HeatmapMode):
        tone = settings.heatmap_tone()
        buckets = bucketize(calculate_heatmap(report, tone), mode.bucket_count, tone)
        return {
            f"heatmap:{index}": HighlightGroup(
                key=f"heatmap:{index}",
                label=f"{index / mode.bucket_count:.2f}-{(index + 1) / mode.bucket_count:.2f}",
                color=bucket.color,
                line_numbers=sorted(bucket.line_numbers),
                bucket=index,
            )
            for index, bucket in sorted(buckets.items())
        }

    return {}


def classify(
    report: BlameReport,
    mode: HighlightMode,
    settings: Settings | None = None,
) -> Classification:
    """Classify the lines of ``report`` for one highlight mode.

    Never raises for a well-formed report. A mode whose parameter is missing,
    and any blame-derived mode over a failed report, gives an empty result.

    Args:
        report: Parsed blame report.
        mode: Active highlight mode and its parameters.
        settings: Colors and tone; defaults to ``Settings()``.

    Returns:
        Groups keyed by ``recent``, ``author:<name>``, ``commit:<sha>``,
        ``heatmap:<bucket>``, ``selected`` or ``branch-diff``, an optional
        uncommitted layer, and the ascending navigation sequence.
    """
    settings = settings or Settings()
    highlight = settings.highlight
    kind = mode.kind

    if isinstance(mode, NoHighlight) or _missing_parameter(mode):
        return Classification(mode=kind)

    if isinstance(mode, BranchDiffMode):
        lines = sorted({number for number in mode.added_lines if number >= 1})
        groups = _single_group("branch-diff", "Changed on branch", highlight.review_highlight_color, lines)
    elif not report.success:
        return Classification(mode=kind)
    else:
        groups = _mode_groups(report, mode, settings)

    uncommitted = None
    if kind in LAYERED_MODES and highlight.enable_uncommitted_highlight:
        pending = uncommitted_lines(report)
        if pending:
            uncommitted = HighlightGroup(
                key="uncommitted",
                label="Uncommitted",
                color=highlight.uncommitted_highlight_color,
                underline=highlight.uncommitted_underline_color,
                line_numbers=pending,
            )

    highlighted = {number for group in groups.values() for number in group.line_numbers}
    if uncommitted is not None:
        highlighted.update(uncommitted.line_numbers)

    result = Classification(mode=kind, groups=groups, uncommitted=uncommitted, navigation=sorted(highlighted))
    log.debug("lines_classified", mode=kind, groups=len(groups), highlighted=len(result.navigation))
    return result


def next_highlight(sequence: Sequence[int], current_line: int) -> int | None:
    """First highlighted line after ``current_line``, wrapping to the first one."""
    if not sequence:
        return None
    index = bisect_right(sequence, current_line)
    return sequence[index] if index < len(sequence) else sequence[0]


def previous_highlight(sequence: Sequence[int], current_line: int) -> int | None:
    """Last highlighted line before ``current_line``, wrapping to the last one."""
    if not sequence:
        return None
    index = bisect_left(sequence, current_line)
    return sequence[index - 1] if index > 0 else sequence[-1]


class Highlighter:
    """Holds the single active mode and its classification.

    Each ``apply`` replaces the previous mode and result wholesale.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.mode: HighlightMode = NoHighlight()
        self.result = Classification()

    @property
    def highlighted_lines(self) -> list[int]:
        return self.result.navigation

    def apply(self, report: BlameReport, mode: HighlightMode) -> Classification:
        self.mode = mode
        self.result = classify(report, mode, self.settings)
        return self.result

    def clear(self) -> None:
        self.mode = NoHighlight()
        self.result = Classification()

    def navigate_next(self, current_line: int) -> int | None:
        return next_highlight(self.result.navigation, current_line)

    def navigate_previous(self, current_line: int) -> int | None:
        return previous_highlight(self.result.navigation, current_line)
