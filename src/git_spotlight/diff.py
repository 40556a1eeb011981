from __future__ import annotations

import re

HUNK_RE = re.compile(r"^@@ -\d+(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def _count(group: str | None) -> int:
    return 1 if group is None else int(group)


def parse_added_lines(diff_text: str) -> list[int]:
    """Line numbers (new-file side) added by a unified diff.

    Produces the ``added_lines`` of branch-diff mode from the output of
    ``git diff <ref> -- <file>``. Hunk header counts decide where a hunk
    ends, so ``+++``/``---`` file headers are never mistaken for content.
    """
    added: set[int] = set()
    current_line_no = 0
    old_remaining = 0
    new_remaining = 0

    for raw in diff_text.splitlines():
        if old_remaining <= 0 and new_remaining <= 0:
            match = HUNK_RE.match(raw)
            if match:
                old_remaining = _count(match.group(1))
                current_line_no = int(match.group(2))
                new_remaining = _count(match.group(3))
            continue

        if raw.startswith("+"):
            added.add(current_line_no)
            current_line_no += 1
            new_remaining -= 1
        elif raw.startswith("-"):
            old_remaining -= 1
        elif raw.startswith("\\"):
            # "\ No newline at end of file"
            continue
        else:
            # context; some tools drop the leading space of empty lines
            current_line_no += 1
            old_remaining -= 1
            new_remaining -= 1

    return sorted(added)
