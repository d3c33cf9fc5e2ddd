"""
ChangeNavigator tests: next/previous change block over displayed diffs.
"""

import pytest

from diffstudio.core.navigator import ChangeNavigator
from diffstudio.core.models import NavigationTarget


@pytest.fixture
def navigator():
    return ChangeNavigator()


class TestNextChange:
    """Forward scan, skipping the block the caret is in"""

    def test_first_block_from_top(self, navigator, sample_diff):
        assert navigator.next_change_block(sample_diff, 0) == NavigationTarget(caret_line=6, first_visible_line=2)

    def test_skips_current_block(self, navigator, sample_diff):
        """From inside -two/+TWO the next stop is -four"""
        assert navigator.next_change_block(sample_diff, 6) == NavigationTarget(caret_line=9, first_visible_line=5)
        assert navigator.next_change_block(sample_diff, 7).caret_line == 9

    def test_no_wrap_after_last_block(self, navigator, sample_diff):
        assert navigator.next_change_block(sample_diff, 9) is None
        assert navigator.next_change_block(sample_diff, 10) is None

    def test_file_header_is_never_a_stop(self, navigator):
        """The ---/+++ lines sit inside the skipped pseudo header"""
        text = "diff --git a/x b/x\nindex 1..2 100644\n--- a/x\n+++ b/x\n@@ -1 +1 @@\n context\n-x\n+y\n"
        assert navigator.next_change_block(text, 0).caret_line == 6

    def test_total_lines_limits_scan(self, navigator, sample_diff):
        assert navigator.next_change_block(sample_diff, 6, total_lines=9) is None

    def test_combined_diff_blocks(self, navigator, combined_diff):
        """Per-parent markers count as changes"""
        assert navigator.next_change_block(combined_diff, 0) == NavigationTarget(caret_line=6, first_visible_line=2)

    def test_empty_buffer(self, navigator):
        assert navigator.next_change_block("", 0) is None


class TestPreviousChange:
    """Backward scan from the top of the current block"""

    def test_previous_block(self, navigator, sample_diff):
        assert navigator.previous_change_block(sample_diff, 10) == NavigationTarget(caret_line=6, first_visible_line=2)

    def test_from_context_line(self, navigator, sample_diff):
        """Caret on ' three' finds the block directly above"""
        assert navigator.previous_change_block(sample_diff, 8).caret_line == 6

    def test_first_block_has_no_previous(self, navigator, sample_diff):
        """File header +++/--- lines are not treated as changes"""
        assert navigator.previous_change_block(sample_diff, 6) is None
        assert navigator.previous_change_block(sample_diff, 7) is None

    def test_caret_past_end_is_clamped(self, navigator, sample_diff):
        assert navigator.previous_change_block(sample_diff, 500).caret_line == 9

    def test_empty_buffer(self, navigator):
        assert navigator.previous_change_block("", 3) is None
