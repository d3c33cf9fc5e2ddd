"""
PatchBuilder tests: hunk rebuilding, header rebuilding and edge cases.
"""

import pytest

from diffstudio.core.patchbuilder import PatchBuilder

MULTI_HUNK = (
    "diff --git a/f.py b/f.py\n"
    "--- a/f.py\n"
    "+++ b/f.py\n"
    "@@ -1,2 +1,3 @@\n"
    " a\n"
    "+b\n"
    " c\n"
    "@@ -10,2 +11,3 @@ def tail\n"
    " x\n"
    "+y\n"
    " z\n"
)

NEW_FILE = (
    "diff --git a/new.txt b/new.txt\n"
    "new file mode 100644\n"
    "index 0000000..3333333\n"
    "--- /dev/null\n"
    "+++ b/new.txt\n"
    "@@ -0,0 +1,2 @@\n"
    "+first\n"
    "+second\n"
)

DELETED_FILE = (
    "diff --git a/gone.txt b/gone.txt\n"
    "deleted file mode 100644\n"
    "index 4444444..0000000\n"
    "--- a/gone.txt\n"
    "+++ /dev/null\n"
    "@@ -1,2 +0,0 @@\n"
    "-alpha\n"
    "-beta\n"
)


@pytest.fixture
def builder():
    return PatchBuilder()


def _select(text: str, needle: str):
    return text.index(needle), len(needle)


def _body(text: str) -> tuple:
    start = text.index("@@")
    return start, len(text) - start


class TestParse:
    """Sections and hunks with absolute offsets"""

    def test_single_section(self, builder, sample_diff):
        sections = builder.parse(sample_diff)
        assert len(sections) == 1
        section = sections[0]
        assert section.header_lines[0].startswith("diff --git")
        assert len(section.hunks) == 1
        hunk = section.hunks[0]
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count) == (1, 4, 1, 4)
        assert [ln.tag for ln in hunk.lines] == [" ", "-", "+", " ", "-", "+"]
        two = hunk.lines[1]
        assert sample_diff[two.start:two.end] == "-two"

    def test_multiple_hunks_and_section_text(self, builder):
        hunks = builder.parse(MULTI_HUNK)[0].hunks
        assert len(hunks) == 2
        assert hunks[1].section == " def tail"

    def test_one_section_per_file(self, builder):
        sections = builder.parse(NEW_FILE + DELETED_FILE)
        assert len(sections) == 2
        assert sections[1].header_value("+++ ") == "/dev/null"


class TestForward:
    """Cherry-pick direction"""

    def test_selected_pair(self, builder, sample_diff):
        start, length = _select(sample_diff, "-two\n+TWO")
        patch = builder.build_from_selection(sample_diff, start, length, keep_header=False)
        assert patch == (
            b"diff --git a/hello.txt b/hello.txt\n"
            b"index 1111111..2222222 100644\n"
            b"--- a/hello.txt\n"
            b"+++ b/hello.txt\n"
            b"@@ -1,4 +1,4 @@\n"
            b" one\n"
            b"-two\n"
            b"+TWO\n"
            b" three\n"
            b" four\n"
        )

    def test_single_added_line(self, builder, sample_diff):
        """Unselected '-' lines turn into context, unselected '+' vanish"""
        start, length = _select(sample_diff, "+FOUR")
        patch = builder.build_from_selection(sample_diff, start, length, keep_header=False)
        assert patch.endswith(b"@@ -1,4 +1,5 @@\n one\n two\n three\n four\n+FOUR\n")

    def test_partial_line_selection_counts(self, builder, sample_diff):
        """Touching any character of a line selects it"""
        start = sample_diff.index("TWO")
        patch = builder.build_from_selection(sample_diff, start, 1, keep_header=False)
        assert b"\n+TWO\n" in patch
        assert b"\n two\n" in patch

    def test_later_hunk_offset(self, builder):
        start, length = _select(MULTI_HUNK, "+b")
        end_start, end_length = _select(MULTI_HUNK, "+y")
        both = builder.build_from_selection(MULTI_HUNK, start, end_start + end_length - start, keep_header=False)
        assert b"@@ -1,2 +1,3 @@\n a\n+b\n c\n" in both
        assert b"@@ -10,2 +11,3 @@ def tail\n x\n+y\n z\n" in both

        only_second = builder.build_from_selection(MULTI_HUNK, end_start, end_length, keep_header=False)
        assert b"@@ -1,2" not in only_second
        assert b"@@ -10,2 +10,3 @@ def tail\n" in only_second

    def test_keep_header_verbatim(self, builder, sample_diff):
        start, length = _select(sample_diff, "-two")
        patch = builder.build_from_selection(sample_diff, start, length, keep_header=True)
        header = sample_diff[:sample_diff.index("@@")]
        assert patch.startswith(header.encode())

    def test_partial_new_file(self, builder):
        start, length = _select(NEW_FILE, "+first")
        patch = builder.build_from_selection(NEW_FILE, start, length, keep_header=False)
        assert b"new file mode 100644\n" in patch
        assert b"--- /dev/null\n+++ b/new.txt\n@@ -0,0 +1,1 @@\n+first\n" in patch
        assert b"second" not in patch

    def test_partial_deletion_keeps_file(self, builder):
        start, length = _select(DELETED_FILE, "-alpha")
        patch = builder.build_from_selection(DELETED_FILE, start, length, keep_header=False)
        assert b"deleted file mode" not in patch
        assert b"--- a/gone.txt\n+++ b/gone.txt\n@@ -1,2 +1,1 @@\n-alpha\n beta\n" in patch

    def test_full_deletion(self, builder):
        start, length = _body(DELETED_FILE)
        patch = builder.build_from_selection(DELETED_FILE, start, length, keep_header=False)
        assert b"deleted file mode 100644\n" in patch
        assert b"+++ /dev/null\n@@ -1,2 +0,0 @@\n-alpha\n-beta\n" in patch

    def test_no_newline_marker_follows_line(self, builder):
        text = "--- a/x\n+++ b/x\n@@ -1 +0,0 @@\n-old\n\\ No newline at end of file\n"
        start, length = _select(text, "-old")
        patch = builder.build_from_selection(text, start, length, keep_header=False)
        assert patch == b"--- a/x\n+++ b/x\n@@ -1,1 +0,0 @@\n-old\n\\ No newline at end of file\n"

    def test_headerless_hunk(self, builder):
        text = "@@ -1,2 +1,2 @@\n a\n-b\n+c\n"
        patch = builder.build_from_selection(text, 0, len(text), keep_header=False)
        assert patch == text.encode()

    def test_only_selected_file_is_emitted(self, builder):
        text = NEW_FILE + DELETED_FILE
        start, length = _select(text, "-beta")
        patch = builder.build_from_selection(text, start, length, keep_header=False)
        assert b"new.txt" not in patch
        assert b"gone.txt" in patch


class TestReverse:
    """Reset worktree lines (revert direction)"""

    def test_selected_pair(self, builder, sample_diff):
        start, length = _select(sample_diff, "-two\n+TWO")
        patch = builder.build_reset_worktree_lines(sample_diff, start, length)
        assert patch == (
            b"diff --git a/hello.txt b/hello.txt\n"
            b"--- a/hello.txt\n"
            b"+++ b/hello.txt\n"
            b"@@ -1,4 +1,4 @@\n"
            b" one\n"
            b"+two\n"
            b"-TWO\n"
            b" three\n"
            b" FOUR\n"
        )

    def test_new_file_becomes_deletion(self, builder):
        start, length = _body(NEW_FILE)
        patch = builder.build_reset_worktree_lines(NEW_FILE, start, length)
        assert patch == (
            b"diff --git a/new.txt b/new.txt\n"
            b"deleted file mode 100644\n"
            b"--- a/new.txt\n"
            b"+++ /dev/null\n"
            b"@@ -1,2 +0,0 @@\n"
            b"-first\n"
            b"-second\n"
        )

    def test_reverse_flag_on_build_from_selection(self, builder, sample_diff):
        start, length = _select(sample_diff, "-two\n+TWO")
        a = builder.build_from_selection(sample_diff, start, length, keep_header=False, reverse_lines=True)
        assert a == builder.build_reset_worktree_lines(sample_diff, start, length)


class TestNothingToApply:
    """Cases that yield an empty patch"""

    def test_header_only_selection(self, builder, sample_diff):
        assert builder.build_from_selection(sample_diff, 0, 10, keep_header=False) == b""

    def test_context_only_selection(self, builder, sample_diff):
        """A context line alone selects no change"""
        start, length = _select(sample_diff, " three")
        assert builder.build_from_selection(sample_diff, start, length, keep_header=False) == b""

    def test_combined_diff(self, builder, combined_diff):
        assert builder.build_from_selection(combined_diff, 0, len(combined_diff), keep_header=False) == b""

    @pytest.mark.parametrize("text,start,length", [
        ("", 0, 0),
        ("@@ -1 +1 @@\n-a\n+b\n", 0, 0),
        ("@@ -1 +1 @@\n-a\n+b\n", 3, -4),
        ("@@ -1 +1 @@\n-a\n+b\n", 500, 3),
    ])
    def test_degenerate_selection(self, builder, text, start, length):
        assert builder.build_from_selection(text, start, length, keep_header=False) == b""
