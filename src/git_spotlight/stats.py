from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from git_spotlight.models import (
    ActivityDay,
    AgeStats,
    AuthorStats,
    BlameReport,
    CommitStats,
    FileStatistics,
)

RECENT_COMMIT_LIMIT = 10
ACTIVITY_WINDOW_DAYS = 30
SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class _AuthorTally:
    lines: int = 0
    commits: set[str] = field(default_factory=set)
    first_commit: int | None = None
    last_commit: int | None = None


@dataclass
class _DayTally:
    commits: set[str] = field(default_factory=set)
    lines: int = 0


def author_initials(author: str) -> str:
    """Up to two initials for compact labels, ``??`` when the name is empty."""
    parts = author.split()
    if not parts:
        return "??"
    if len(parts) == 1:
        return parts[0][:2].upper()
    return (parts[0][0] + parts[-1][0]).upper()


def compute_file_statistics(
    file_path: str,
    report: BlameReport,
    remote_url: str | None = None,
    now: datetime | None = None,
) -> FileStatistics:
    """Summarize authorship, recent commits, and age for one file.

    Lines with an unknown timestamp count toward author and commit totals but
    are left out of first/last commit times, the activity timeline, and the
    age summary.
    """
    now = now or datetime.now(timezone.utc)
    now_seconds = now.timestamp()
    window_start = now_seconds - ACTIVITY_WINDOW_DAYS * SECONDS_PER_DAY

    authors: dict[str, _AuthorTally] = {}
    commits: dict[str, CommitStats] = {}
    activity: dict[str, _DayTally] = {}
    uncommitted = 0
    dated_times: list[int] = []

    for info in report.sorted_lines():
        if info.is_uncommitted:
            uncommitted += 1
            continue

        tally = authors.setdefault(info.author, _AuthorTally())
        tally.lines += 1
        tally.commits.add(info.commit_id)

        commit = commits.get(info.commit_id)
        if commit is None:
            commit = CommitStats(
                commit_id=info.commit_id,
                short_id=info.short_id,
                author=info.author,
                timestamp=info.author_timestamp,
                summary=info.summary,
                line_count=0,
            )
            commits[info.commit_id] = commit
        commit.line_count += 1

        if not info.has_timestamp:
            continue

        timestamp = info.author_timestamp
        dated_times.append(timestamp)
        tally.first_commit = timestamp if tally.first_commit is None else min(tally.first_commit, timestamp)
        tally.last_commit = timestamp if tally.last_commit is None else max(tally.last_commit, timestamp)

        if timestamp >= window_start:
            day = datetime.fromtimestamp(timestamp, tz=timezone.utc).date().isoformat()
            day_tally = activity.setdefault(day, _DayTally())
            day_tally.commits.add(info.commit_id)
            day_tally.lines += 1

    total_lines = report.line_count
    author_stats = sorted(
        (
            AuthorStats(
                name=name,
                initials=author_initials(name),
                line_count=tally.lines,
                percentage=(tally.lines / total_lines) * 100 if total_lines else 0.0,
                first_commit=tally.first_commit or 0,
                last_commit=tally.last_commit or 0,
                commit_count=len(tally.commits),
            )
            for name, tally in authors.items()
        ),
        key=lambda stats: stats.line_count,
        reverse=True,
    )

    recent_commits = sorted(commits.values(), key=lambda commit: commit.timestamp, reverse=True)
    timeline = [
        ActivityDay(date=day, commits=len(tally.commits), lines=tally.lines)
        for day, tally in sorted(activity.items())
    ]

    age_stats = AgeStats()
    if dated_times:
        total_age_days = sum((now_seconds - timestamp) / SECONDS_PER_DAY for timestamp in dated_times)
        age_stats = AgeStats(
            oldest_commit=min(dated_times),
            newest_commit=max(dated_times),
            average_age_days=total_age_days / len(dated_times),
        )

    return FileStatistics(
        file_path=file_path,
        remote_url=remote_url,
        generated_at=now,
        total_lines=total_lines,
        uncommitted_lines=uncommitted,
        authors=author_stats,
        recent_commits=recent_commits[:RECENT_COMMIT_LIMIT],
        activity_timeline=timeline,
        age_stats=age_stats,
    )