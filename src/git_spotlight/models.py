"""Pydantic models shared across parsing, caching, heatmap, and classification layers."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

UNCOMMITTED_COMMIT_ID = "0" * 40


class BlameLine(BaseModel):
    """Provenance of a single line in the final file."""

    model_config = ConfigDict(frozen=True)

    line_number: int = Field(ge=1)
    original_line_number: int = 0
    commit_id: str
    author: str = ""
    author_mail: str = ""
    author_timestamp: int = 0
    author_timezone: str = ""
    summary: str = ""
    is_uncommitted: bool = False
    filename: str = ""
    is_boundary: bool = False
    previous_commit_id: str | None = None
    previous_filename: str | None = None

    @property
    def short_id(self) -> str:
        return self.commit_id[:8]

    @property
    def has_timestamp(self) -> bool:
        """``author_timestamp`` of 0 means the metadata was missing, not the epoch."""
        return self.author_timestamp > 0


class BlameReport(BaseModel):
    """Outcome of parsing one blame report."""

    model_config = ConfigDict(frozen=True)

    success: bool
    lines: dict[int, BlameLine] = Field(default_factory=dict)
    line_count: int = 0
    error: str | None = None

    def get(self, line_number: int) -> BlameLine | None:
        return self.lines.get(line_number)

    def sorted_lines(self) -> list[BlameLine]:
        return [self.lines[number] for number in sorted(self.lines)]


class CacheStats(BaseModel):
    """Cache counters; ``hit_rate`` is a percentage."""

    entry_count: int
    hits: int
    misses: int
    hit_rate: float


class HeatmapConfig(BaseModel):
    """Gradient endpoints and tone used for age colors (cold = oldest)."""

    cold_hue: float = 240.0
    hot_hue: float = 160.0
    saturation: float = Field(default=55.0, ge=0.0, le=100.0)
    lightness: float = Field(default=45.0, ge=0.0, le=100.0)
    opacity: float = Field(default=0.30, ge=0.0, le=1.0)


class HeatmapLine(BaseModel):
    line_number: int
    age_ratio: float = Field(ge=0.0, le=1.0)
    color: str
    timestamp: int


class HeatmapBucket(BaseModel):
    index: int
    color: str
    line_numbers: list[int] = Field(default_factory=list)


class NoHighlight(BaseModel):
    kind: Literal["none"] = "none"


class AgeMode(BaseModel):
    """Highlight lines authored at or after ``cutoff_ms`` (epoch milliseconds)."""

    kind: Literal["age"] = "age"
    cutoff_ms: int | None = None


class AuthorMode(BaseModel):
    kind: Literal["author"] = "author"


class CommitMode(BaseModel):
    kind: Literal["commit"] = "commit"


class HeatmapMode(BaseModel):
    kind: Literal["heatmap"] = "heatmap"
    bucket_count: int = Field(default=20, ge=1)


class SpecificAuthorMode(BaseModel):
    kind: Literal["specificAuthor"] = "specificAuthor"
    author: str | None = None


class SpecificCommitMode(BaseModel):
    """Highlight one commit; ``commit`` may be an abbreviated id."""

    kind: Literal["specificCommit"] = "specificCommit"
    commit: str | None = None


class BranchDiffMode(BaseModel):
    """Highlight lines added relative to a reference, as computed by a diff."""

    kind: Literal["branchDiff"] = "branchDiff"
    added_lines: list[int] | None = None


HighlightMode = Annotated[
    Union[
        NoHighlight,
        AgeMode,
        AuthorMode,
        CommitMode,
        HeatmapMode,
        SpecificAuthorMode,
        SpecificCommitMode,
        BranchDiffMode,
    ],
    Field(discriminator="kind"),
]


class HighlightGroup(BaseModel):
    """Lines sharing one rendered style."""

    key: str
    label: str
    color: str
    line_numbers: list[int] = Field(default_factory=list)
    bucket: int | None = None
    underline: str | None = None


class Classification(BaseModel):
    """Grouped highlight output handed to a rendering collaborator."""

    mode: str = "none"
    groups: dict[str, HighlightGroup] = Field(default_factory=dict)
    uncommitted: HighlightGroup | None = None
    navigation: list[int] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.navigation


class ParsedDuration(BaseModel):
    cutoff_ms: int
    description: str


class AuthorStats(BaseModel):
    name: str
    initials: str
    line_count: int
    percentage: float
    first_commit: int
    last_commit: int
    commit_count: int


class CommitStats(BaseModel):
    commit_id: str
    short_id: str
    author: str
    timestamp: int
    summary: str
    line_count: int


class ActivityDay(BaseModel):
    date: str
    commits: int
    lines: int


class AgeStats(BaseModel):
    oldest_commit: int = 0
    newest_commit: int = 0
    average_age_days: float = 0.0


class FileStatistics(BaseModel):
    """Per-file summary of blame data."""

    file_path: str
    remote_url: str | None = None
    generated_at: datetime
    total_lines: int
    uncommitted_lines: int
    authors: list[AuthorStats] = Field(default_factory=list)
    recent_commits: list[CommitStats] = Field(default_factory=list)
    activity_timeline: list[ActivityDay] = Field(default_factory=list)
    age_stats: AgeStats = Field(default_factory=AgeStats)
