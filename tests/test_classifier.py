from __future__ import annotations

import pytest
from pydantic import ValidationError

from git_spotlight.classifier import Highlighter, classify, next_highlight, parse_mode, previous_highlight
from git_spotlight.colors import DISTINCT_PALETTE, color_for, hsl_to_rgba
from git_spotlight.config import HighlightSettings, Settings
from git_spotlight.heatmap import heatmap_color
from git_spotlight.models import (
    AgeMode,
    AuthorMode,
    BlameReport,
    BranchDiffMode,
    CommitMode,
    HeatmapConfig,
    HeatmapMode,
    NoHighlight,
    SpecificAuthorMode,
    SpecificCommitMode,
)

JOHN_SHA = "abc123def456789012345678901234567890abcd"
JANE_SHA = "def456789012345678901234567890abcdef1234"


def test_classify_given_age_mode_when_classified_then_recent_and_uncommitted_layers_are_split(sample_report) -> None:
    # Given
    mode = AgeMode(cutoff_ms=1718400000 * 1000)

    # When
    result = classify(sample_report, mode)

    # Then
    assert result.mode == "age"
    assert list(result.groups) == ["recent"]
    assert result.groups["recent"].line_numbers == [1]
    assert result.groups["recent"].color == Settings().highlight.age_highlight_color
    assert result.uncommitted is not None
    assert result.uncommitted.line_numbers == [3]
    assert result.navigation == [1, 3]


def test_classify_given_uncommitted_layer_disabled_when_classified_then_only_mode_lines_navigate(
    sample_report,
) -> None:
    # Given
    settings = Settings(highlight=HighlightSettings(enable_uncommitted_highlight=False))

    # When
    result = classify(sample_report, AgeMode(cutoff_ms=1718400000 * 1000), settings)

    # Then
    assert result.uncommitted is None
    assert result.navigation == [1]


def test_classify_given_author_mode_when_classified_then_one_group_per_committed_author(sample_report) -> None:
    # Given
    settings = Settings()
    tone = settings.highlight

    # When
    result = classify(sample_report, AuthorMode(), settings)

    # Then
    assert set(result.groups) == {"author:John Doe", "author:Jane Smith"}
    john = result.groups["author:John Doe"]
    assert john.label == "John Doe"
    assert john.line_numbers == [1]
    assert john.color == color_for("John Doe", tone.color_saturation, tone.color_lightness, tone.color_opacity)
    assert result.uncommitted is not None
    assert result.navigation == [1, 2, 3]


def test_classify_given_distinct_palette_when_author_mode_then_palette_colors_follow_line_order(
    sample_report,
) -> None:
    # Given
    settings = Settings(highlight=HighlightSettings(distinct_palette=True, color_opacity=0.5))

    # When
    result = classify(sample_report, AuthorMode(), settings)

    # Then
    hue, saturation, lightness = DISTINCT_PALETTE[0]
    assert result.groups["author:John Doe"].color == hsl_to_rgba(hue, saturation, lightness, 0.5)


def test_classify_given_commit_mode_when_classified_then_groups_are_keyed_by_commit(sample_report) -> None:
    # When
    result = classify(sample_report, CommitMode())

    # Then
    assert set(result.groups) == {f"commit:{JOHN_SHA}", f"commit:{JANE_SHA}"}
    assert result.groups[f"commit:{JANE_SHA}"].line_numbers == [2]


def test_classify_given_specific_author_when_classified_then_match_ignores_case_and_padding(sample_report) -> None:
    # When
    result = classify(sample_report, SpecificAuthorMode(author="  jane SMITH "))

    # Then
    assert list(result.groups) == ["selected"]
    assert result.groups["selected"].line_numbers == [2]
    assert result.uncommitted is None
    assert result.navigation == [2]


def test_classify_given_specific_commit_prefix_when_classified_then_matching_lines_are_selected(
    sample_report,
) -> None:
    # When
    result = classify(sample_report, SpecificCommitMode(commit="def456"))

    # Then
    assert result.groups["selected"].line_numbers == [2]
    assert result.groups["selected"].color == Settings().highlight.selected_highlight_color


def test_classify_given_specific_commit_without_match_when_classified_then_result_is_empty(sample_report) -> None:
    # When
    result = classify(sample_report, SpecificCommitMode(commit="ffff"))

    # Then
    assert result.groups == {}
    assert result.is_empty is True


@pytest.mark.parametrize(
    "mode",
    [
        NoHighlight(),
        AgeMode(),
        SpecificAuthorMode(),
        SpecificAuthorMode(author="   "),
        SpecificCommitMode(),
        SpecificCommitMode(commit=""),
        BranchDiffMode(),
    ],
)
def test_classify_given_mode_without_parameter_when_classified_then_nothing_is_highlighted(
    sample_report,
    mode,
) -> None:
    # When
    result = classify(sample_report, mode)

    # Then
    assert result.mode == mode.kind
    assert result.groups == {}
    assert result.uncommitted is None
    assert result.navigation == []


def test_classify_given_heatmap_mode_when_classified_then_lines_land_in_extreme_buckets(sample_report) -> None:
    # When
    result = classify(sample_report, HeatmapMode(bucket_count=20))

    # Then
    assert list(result.groups) == ["heatmap:0", "heatmap:19"]
    oldest = result.groups["heatmap:0"]
    newest = result.groups["heatmap:19"]
    assert oldest.line_numbers == [2]
    assert oldest.label == "0.00-0.05"
    assert oldest.bucket == 0
    assert newest.line_numbers == [1]
    assert newest.label == "0.95-1.00"
    assert result.uncommitted is not None
    assert result.navigation == [1, 2, 3]


def test_classify_given_branch_diff_when_classified_then_added_lines_are_cleaned_and_sorted(sample_report) -> None:
    # When
    result = classify(sample_report, BranchDiffMode(added_lines=[12, 3, 3, 0, -1, 7]))

    # Then
    assert list(result.groups) == ["branch-diff"]
    assert result.groups["branch-diff"].line_numbers == [3, 7, 12]
    assert result.groups["branch-diff"].color == Settings().highlight.review_highlight_color
    assert result.uncommitted is None
    assert result.navigation == [3, 7, 12]


def test_classify_given_failed_report_when_branch_diff_then_added_lines_still_highlight() -> None:
    # Given
    failed = BlameReport(success=False, error="boom")

    # When
    result = classify(failed, BranchDiffMode(added_lines=[4]))

    # Then
    assert result.navigation == [4]


def test_classify_given_failed_report_when_author_mode_then_result_is_empty() -> None:
    # Given
    failed = BlameReport(success=False, error="boom")

    # When
    result = classify(failed, AuthorMode())

    # Then
    assert result.groups == {}
    assert result.navigation == []


@pytest.mark.parametrize(
    ("current", "expected_next", "expected_previous"),
    [(1, 3, 12), (3, 7, 12), (5, 7, 3), (7, 12, 3), (12, 3, 7), (20, 3, 12)],
)
def test_navigation_given_highlight_sequence_when_moving_then_wraps_at_both_ends(
    current,
    expected_next,
    expected_previous,
) -> None:
    # Given
    sequence = [3, 7, 12]

    # When / Then
    assert next_highlight(sequence, current) == expected_next
    assert previous_highlight(sequence, current) == expected_previous


def test_navigation_given_empty_sequence_when_moving_then_none_is_returned() -> None:
    assert next_highlight([], 5) is None
    assert previous_highlight([], 5) is None


def test_highlighter_given_applied_mode_when_navigating_then_uses_current_result(sample_report) -> None:
    # Given
    highlighter = Highlighter()

    # When
    highlighter.apply(sample_report, BranchDiffMode(added_lines=[3, 7, 12]))

    # Then
    assert highlighter.mode.kind == "branchDiff"
    assert highlighter.highlighted_lines == [3, 7, 12]
    assert highlighter.navigate_next(12) == 3
    assert highlighter.navigate_previous(3) == 12


def test_highlighter_given_new_mode_when_applied_then_previous_result_is_replaced(sample_report) -> None:
    # Given
    highlighter = Highlighter()
    highlighter.apply(sample_report, BranchDiffMode(added_lines=[3, 7, 12]))

    # When
    highlighter.apply(sample_report, SpecificAuthorMode(author="John Doe"))

    # Then
    assert highlighter.highlighted_lines == [1]


def test_highlighter_given_active_mode_when_cleared_then_nothing_is_highlighted(sample_report) -> None:
    # Given
    highlighter = Highlighter()
    highlighter.apply(sample_report, AuthorMode())

    # When
    highlighter.clear()

    # Then
    assert isinstance(highlighter.mode, NoHighlight)
    assert highlighter.highlighted_lines == []
    assert highlighter.navigate_next(1) is None


def test_parse_mode_given_tagged_mapping_when_parsed_then_matching_mode_model_is_built() -> None:
    # When
    mode = parse_mode({"kind": "specificCommit", "commit": "abc123"})
    heatmap = parse_mode({"kind": "heatmap"})

    # Then
    assert isinstance(mode, SpecificCommitMode)
    assert mode.commit == "abc123"
    assert isinstance(heatmap, HeatmapMode)
    assert heatmap.bucket_count == 20


def test_parse_mode_given_unknown_kind_when_parsed_then_validation_error() -> None:
    with pytest.raises(ValidationError):
        parse_mode({"kind": "rainbow"})


def test_classify_given_uncommitted_layer_when_classified_then_group_carries_underline_color(sample_report) -> None:
    # Given
    settings = Settings(highlight=HighlightSettings(uncommitted_underline_color="rgba(1,2,3,0.5)"))

    # When
    result = classify(sample_report, AuthorMode(), settings)

    # Then
    assert result.uncommitted is not None
    assert result.uncommitted.underline == "rgba(1,2,3,0.5)"
    assert all(group.underline is None for group in result.groups.values())


def test_classify_given_tuned_highlight_tone_when_heatmap_mode_then_bucket_colors_follow_it(sample_report) -> None:
    # Given
    tuned = Settings(
        highlight=HighlightSettings(color_saturation=100, color_lightness=50, color_opacity=0.9),
        heatmap={"cold_hue": 0, "hot_hue": 120},
    )
    expected_tone = HeatmapConfig(cold_hue=0, hot_hue=120, saturation=100, lightness=50, opacity=0.9)

    # When
    default_result = classify(sample_report, HeatmapMode(bucket_count=20))
    tuned_result = classify(sample_report, HeatmapMode(bucket_count=20), tuned)

    # Then
    assert tuned_result.groups["heatmap:0"].color == heatmap_color(0.025, expected_tone)
    assert tuned_result.groups["heatmap:19"].color == heatmap_color(0.975, expected_tone)
    assert tuned_result.groups["heatmap:0"].color != default_result.groups["heatmap:0"].color
