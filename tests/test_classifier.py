"""
LineClassifier tests: format detection, prefix sets and line roles.
"""

import pytest

from diffstudio.core.classifier import LineClassifier


@pytest.fixture
def classifier():
    return LineClassifier()


class TestFormatDetection:
    """Combined diff detection and format selection"""

    def test_unified_diff_is_not_combined(self, classifier, sample_diff):
        """A regular git diff (with +++/--- headers) is not combined"""
        assert not classifier.is_combined_diff(sample_diff)
        assert classifier.detect_format(sample_diff) == LineClassifier.FORMAT_UNIFIED

    def test_combined_diff_detected(self, classifier, combined_diff):
        """diff --cc header and @@@ hunk header mark a combined diff"""
        assert classifier.is_combined_diff(combined_diff)
        assert classifier.detect_format(combined_diff) == LineClassifier.FORMAT_COMBINED

    def test_triple_at_hunk_header_alone_is_enough(self, classifier):
        """A merge hunk header without the file header still counts"""
        assert classifier.is_combined_diff("@@@ -1,1 -1,1 +1,2 @@@\n  a\n++b\n")

    def test_empty_text(self, classifier):
        assert not classifier.is_combined_diff("")

    def test_plain_view(self, classifier, combined_diff):
        """Views that do not show a patch are always plain"""
        assert classifier.detect_format(combined_diff, is_patch=False) == LineClassifier.FORMAT_PLAIN

    def test_prefix_sets(self, classifier):
        assert classifier.prefixes_for(LineClassifier.FORMAT_PLAIN) == ()
        assert classifier.prefixes_for(LineClassifier.FORMAT_UNIFIED) == (" ", "-", "+")
        assert len(classifier.prefixes_for(LineClassifier.FORMAT_COMBINED)) == 7
        assert "++" in classifier.prefixes_for(LineClassifier.FORMAT_COMBINED)


class TestUnifiedRoles:
    """Single marker column"""

    @pytest.mark.parametrize("line,role", [
        ("+added", LineClassifier.ROLE_ADDED),
        ("-removed", LineClassifier.ROLE_REMOVED),
        (" context", LineClassifier.ROLE_CONTEXT),
        ("@@ -1,2 +1,2 @@", LineClassifier.ROLE_HEADER),
        ("diff --git a/x b/x", LineClassifier.ROLE_HEADER),
        ("index 123..456 100644", LineClassifier.ROLE_HEADER),
        ("\\ No newline at end of file", LineClassifier.ROLE_OTHER),
        ("", LineClassifier.ROLE_OTHER),
    ])
    def test_roles(self, classifier, line, role):
        assert classifier.classify_line(LineClassifier.FORMAT_UNIFIED, line) == role

    def test_change_line(self, classifier):
        assert classifier.is_change_line(LineClassifier.FORMAT_UNIFIED, "+x")
        assert classifier.is_change_line(LineClassifier.FORMAT_UNIFIED, "-x")
        assert not classifier.is_change_line(LineClassifier.FORMAT_UNIFIED, " +x")


class TestCombinedRoles:
    """One marker column per parent"""

    @pytest.mark.parametrize("line,role", [
        ("  context", LineClassifier.ROLE_CONTEXT),
        ("++both", LineClassifier.ROLE_ADDED),
        ("+ ours", LineClassifier.ROLE_ADDED),
        (" +theirs", LineClassifier.ROLE_ADDED),
        ("--both", LineClassifier.ROLE_REMOVED),
        ("- ours", LineClassifier.ROLE_REMOVED),
        (" -theirs", LineClassifier.ROLE_REMOVED),
        ("@@@ -1,2 -1,2 +1,3 @@@", LineClassifier.ROLE_HEADER),
        ("x", LineClassifier.ROLE_OTHER),
    ])
    def test_roles(self, classifier, line, role):
        assert classifier.classify_line(LineClassifier.FORMAT_COMBINED, line) == role


def test_plain_lines_have_no_diff_role(classifier):
    """Plain files never report changes"""
    assert classifier.classify_line(LineClassifier.FORMAT_PLAIN, "+not a change") == LineClassifier.ROLE_OTHER
    assert not classifier.is_change_line(LineClassifier.FORMAT_PLAIN, "-nope")
