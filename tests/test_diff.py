from __future__ import annotations

from git_spotlight.diff import parse_added_lines

SAMPLE_DIFF = """diff --git a/src/app.ts b/src/app.ts
index 1111111..2222222 100644
--- a/src/app.ts
+++ b/src/app.ts
@@ -1,3 +1,4 @@
 const a = 1;
+const added = 2;
 const b = 3;
 const c = 4;
@@ -10,2 +11,3 @@ function render() {
 return value;
-old();
+fresh();
+another();
"""


def test_parse_added_lines_given_two_hunks_when_parsed_then_new_side_line_numbers_are_returned() -> None:
    assert parse_added_lines(SAMPLE_DIFF) == [2, 12, 13]


def test_parse_added_lines_given_hunk_without_counts_when_parsed_then_single_line_hunk_is_used() -> None:
    # Given
    diff_text = "\n".join(["--- a/x", "+++ b/x", "@@ -5 +5 @@", "-before", "+after", "\\ No newline at end of file"])

    # When
    added = parse_added_lines(diff_text)

    # Then
    assert added == [5]


def test_parse_added_lines_given_plus_prefixed_content_when_parsed_then_it_is_not_a_file_header() -> None:
    # Given
    diff_text = "\n".join(["@@ -0,0 +1,2 @@", "+++counter;", "+--other;"])

    # When
    added = parse_added_lines(diff_text)

    # Then
    assert added == [1, 2]


def test_parse_added_lines_given_empty_diff_when_parsed_then_nothing_is_added() -> None:
    assert parse_added_lines("") == []
