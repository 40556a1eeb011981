"""Age heatmap: older code maps to the cold hue, newer code to the hot hue."""

from __future__ import annotations

import math

from git_spotlight.colors import hsl_to_rgba
from git_spotlight.models import BlameReport, HeatmapBucket, HeatmapConfig, HeatmapLine

DEFAULT_BUCKET_COUNT = 20

AGE_BRACKETS = (
    (0.9, "Very Recent"),
    (0.7, "Recent"),
    (0.5, "Moderate"),
    (0.3, "Old"),
)


def _interpolate_hue(cold_hue: float, hot_hue: float, ratio: float) -> float:
    # straight line between the endpoints, not the shortest arc
    return cold_hue + (hot_hue - cold_hue) * ratio


def heatmap_color(age_ratio: float, config: HeatmapConfig | None = None) -> str:
    config = config or HeatmapConfig()
    hue = _interpolate_hue(config.cold_hue, config.hot_hue, age_ratio)
    return hsl_to_rgba(hue, config.saturation, config.lightness, config.opacity)


def calculate_heatmap(report: BlameReport, config: HeatmapConfig | None = None) -> list[HeatmapLine]:
    """Compute an age ratio and color for every committed line.

    Uncommitted lines and lines without a known timestamp are left out.
    When every remaining line has the same timestamp, each ratio is 0.

    Args:
        report: Parsed blame report.
        config: Gradient settings; defaults to blue (old) to teal (new).

    Returns:
        Heatmap entries sorted by line number.
    """
    config = config or HeatmapConfig()
    dated = [info for info in report.sorted_lines() if not info.is_uncommitted and info.has_timestamp]
    if not dated:
        return []

    min_time = min(info.author_timestamp for info in dated)
    max_time = max(info.author_timestamp for info in dated)
    time_range = max_time - min_time

    data: list[HeatmapLine] = []
    for info in dated:
        age_ratio = (info.author_timestamp - min_time) / time_range if time_range > 0 else 0.0
        data.append(
            HeatmapLine(
                line_number=info.line_number,
                age_ratio=age_ratio,
                color=heatmap_color(age_ratio, config),
                timestamp=info.author_timestamp,
            )
        )
    return data


def bucket_index(age_ratio: float, bucket_count: int) -> int:
    return min(max(math.floor(age_ratio * bucket_count), 0), bucket_count - 1)


def bucketize(
    data: list[HeatmapLine],
    bucket_count: int = DEFAULT_BUCKET_COUNT,
    config: HeatmapConfig | None = None,
) -> dict[int, HeatmapBucket]:
    """Group heatmap lines into equal-width age buckets sharing one color.

    Each bucket is colored at its midpoint ratio, which bounds the number of
    distinct styles to ``bucket_count``.

    Raises:
        ValueError: If ``bucket_count`` is below 1.
    """
    if bucket_count < 1:
        raise ValueError(f"bucket_count must be at least 1, got {bucket_count}")
    config = config or HeatmapConfig()

    buckets: dict[int, HeatmapBucket] = {}
    for entry in data:
        index = bucket_index(entry.age_ratio, bucket_count)
        bucket = buckets.get(index)
        if bucket is None:
            midpoint = (index + 0.5) / bucket_count
            bucket = HeatmapBucket(index=index, color=heatmap_color(midpoint, config))
            buckets[index] = bucket
        bucket.line_numbers.append(entry.line_number)
    return buckets


def age_bracket(age_ratio: float) -> str:
    for threshold, label in AGE_BRACKETS:
        if age_ratio >= threshold:
            return label
    return "Very Old"
