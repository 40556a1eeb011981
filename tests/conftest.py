from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from git_spotlight.models import BlameLine, BlameReport
from git_spotlight.parser import parse_blame_report

SAMPLE_BLAME_OUTPUT = """abc123def456789012345678901234567890abcd 1 1 1
author John Doe
author-mail <john@example.com>
author-time 1718452800
author-tz +0000
committer John Doe
committer-mail <john@example.com>
committer-time 1718452800
committer-tz +0000
summary Initial commit
filename test.ts
\tconst x = 1;
def456789012345678901234567890abcdef1234 2 2 1
author Jane Smith
author-mail <jane@example.com>
author-time 1718366400
author-tz +0000
committer Jane Smith
committer-mail <jane@example.com>
committer-time 1718366400
committer-tz +0000
summary Add feature
filename test.ts
\tconst y = 2;
0000000000000000000000000000000000000000 3 3 1
author Not Committed Yet
author-mail <not.committed.yet>
author-time 1718539200
author-tz +0000
committer Not Committed Yet
committer-mail <not.committed.yet>
committer-time 1718539200
committer-tz +0000
summary
filename test.ts
\tconst z = 3;
"""

BlockFactory = Callable[..., str]


@pytest.fixture
def sample_blame_output() -> str:
    return SAMPLE_BLAME_OUTPUT


@pytest.fixture
def sample_report() -> BlameReport:
    return parse_blame_report(SAMPLE_BLAME_OUTPUT)


@pytest.fixture
def blame_block() -> BlockFactory:
    """Build one ``--line-porcelain`` block."""

    def build(
        line: int,
        commit_id: str = "a" * 40,
        author: str = "Alice",
        timestamp: int = 1_700_000_000,
        summary: str = "Change",
        filename: str = "src/app.py",
        content: str = "pass",
    ) -> str:
        return "\n".join(
            [
                f"{commit_id} {line} {line} 1",
                f"author {author}",
                f"author-mail <{author.lower().replace(' ', '.')}@example.com>",
                f"author-time {timestamp}",
                "author-tz +0100",
                f"committer {author}",
                "committer-mail <ci@example.com>",
                f"committer-time {timestamp}",
                "committer-tz +0000",
                f"summary {summary}",
                f"filename {filename}",
                f"\t{content}",
            ]
        )

    return build


@pytest.fixture
def make_report() -> Callable[[list[BlameLine]], BlameReport]:
    def build(lines: list[BlameLine]) -> BlameReport:
        return BlameReport(
            success=True,
            lines={line.line_number: line for line in lines},
            line_count=len(lines),
        )

    return build
