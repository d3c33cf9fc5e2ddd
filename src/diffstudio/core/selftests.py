"""Diff Studio core: in-process self tests."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Tuple

from .classifier import LineClassifier
from .copyfilter import CopyFilter
from .extractor import SelectionPatchExtractor
from .git import GitRunner, SelectionApplier
from .hexdump import HexDumpFormatter
from .lineendings import LineEndingNormalizer
from .navigator import ChangeNavigator

SAMPLE_DIFF = (
    "diff --git a/hello.txt b/hello.txt\n"
    "index 1111111..2222222 100644\n"
    "--- a/hello.txt\n"
    "+++ b/hello.txt\n"
    "@@ -1,4 +1,4 @@\n"
    " one\n"
    "-two\n"
    "+TWO\n"
    " three\n"
    "-four\n"
    "+FOUR\n"
)

COMBINED_DIFF = (
    "diff --cc hello.txt\n"
    "index 1111111,2222222..3333333\n"
    "--- a/hello.txt\n"
    "+++ b/hello.txt\n"
    "@@@ -1,2 -1,2 +1,3 @@@\n"
    "  one\n"
    "+ ours\n"
    " +theirs\n"
    "++both\n"
)


class DiffStudioSelfTests:
    """
    In-process self tests using embedded diff strings and, when git is
    available, a temporary repository.
    """

    @staticmethod
    def run() -> Tuple[bool, str]:
        classifier = LineClassifier()
        navigator = ChangeNavigator(classifier)
        copier = CopyFilter(classifier)
        extractor = SelectionPatchExtractor()
        hexdump = HexDumpFormatter()
        endings = LineEndingNormalizer()

        report_lines = []
        ok = True

        def fail(msg: str) -> None:
            nonlocal ok
            ok = False
            report_lines.append("FAIL: " + msg)

        def pass_(msg: str) -> None:
            report_lines.append("OK: " + msg)

        # 1) Format detection
        if classifier.is_combined_diff(SAMPLE_DIFF) or not classifier.is_combined_diff(COMBINED_DIFF):
            fail("Combined diff detection incorrect.")
        else:
            pass_("Combined diff detection.")

        # 2) Navigation
        nxt = navigator.next_change_block(SAMPLE_DIFF, 0)
        nxt2 = navigator.next_change_block(SAMPLE_DIFF, 6)
        prev = navigator.previous_change_block(SAMPLE_DIFF, 10)
        if nxt is None or nxt.caret_line != 6 or nxt2 is None or nxt2.caret_line != 9:
            fail("Next change navigation incorrect.")
        elif prev is None or prev.caret_line != 6 or prev.first_visible_line != 2:
            fail("Previous change navigation incorrect.")
        else:
            pass_("Change block navigation.")

        # 3) Copy without diff markers
        body_start = SAMPLE_DIFF.index(" one")
        copied = copier.copy_text(SAMPLE_DIFF, body_start, len(SAMPLE_DIFF) - body_start)
        if copied != "one\ntwo\nTWO\nthree\nfour\nFOUR\n":
            fail("Copy with prefix strip incorrect.")
        else:
            pass_("Copy with prefix strip.")

        new_version = copier.copy_new_version(SAMPLE_DIFF, body_start, len(SAMPLE_DIFF) - body_start)
        old_version = copier.copy_old_version(SAMPLE_DIFF, body_start, len(SAMPLE_DIFF) - body_start)
        if new_version != "one\nTWO\nthree\nFOUR\n" or old_version != "one\ntwo\nthree\nfour\n":
            fail("Copy new/old version incorrect.")
        else:
            pass_("Copy new/old version.")

        # 4) Selection -> patch
        sel_start = SAMPLE_DIFF.index("-two")
        sel_len = len("-two\n+TWO")
        fwd = extractor.extract_patch(SAMPLE_DIFF, sel_start, sel_len, reverse=False)
        rev = extractor.extract_patch(SAMPLE_DIFF, sel_start, sel_len, reverse=True)
        if b"@@ -1,4 +1,4 @@\n one\n-two\n+TWO\n three\n four\n" not in fwd:
            fail("Forward selected-lines patch incorrect.")
        elif b"@@ -1,4 +1,4 @@\n one\n+two\n-TWO\n three\n FOUR\n" not in rev:
            fail("Reverse selected-lines patch incorrect.")
        elif extractor.extract_patch(SAMPLE_DIFF, sel_start, 0, reverse=False):
            fail("Empty selection produced a patch.")
        else:
            pass_("Selected-lines patch extraction.")

        # 5) Hex dump + line endings
        dump = hexdump.format(bytes(range(0x41, 0x51)))
        if dump != "0000    41 42 43 44 45 46 47 48  49 4A 4B 4C 4D 4E 4F 50    ABCDEFGH IJKLMNOP":
            fail("Hex dump layout incorrect.")
        elif hexdump.format(b"") != "":
            fail("Hex dump of empty input not empty.")
        else:
            pass_("Hex dump layout.")

        if endings.normalize("a\r\nb\r\n", "\n") != "a\nb\n" or endings.normalize("a\rb", "\r\n") != "a\r\nb":
            fail("Line ending normalization incorrect.")
        else:
            pass_("Line ending normalization.")

        # 6) git apply round trip (needs git)
        if shutil.which("git") is None:
            pass_("git apply skipped (git not found).")
            return ok, "\n".join(report_lines)

        with tempfile.TemporaryDirectory() as td:
            root = Path(td).resolve()
            subprocess.run(["git", "init", "-q"], cwd=root, check=True, capture_output=True)
            target = root / "hello.txt"
            target.write_bytes(b"one\ntwo\nthree\nfour\n")
            # --3way implies --index
            subprocess.run(["git", "add", "hello.txt"], cwd=root, check=True, capture_output=True)

            applier = SelectionApplier(GitRunner(root))
            res = applier.apply_selected_lines(SAMPLE_DIFF, sel_start, sel_len, reverse=False)
            if not res.success or target.read_bytes() != b"one\nTWO\nthree\nfour\n":
                fail("Cherry-pick of selected lines failed: " + res.output)
            else:
                pass_("Cherry-pick of selected lines.")

            # revert the same lines against the now-modified worktree
            worktree_diff = (
                "diff --git a/hello.txt b/hello.txt\n"
                "--- a/hello.txt\n"
                "+++ b/hello.txt\n"
                "@@ -1,4 +1,4 @@\n"
                " one\n"
                "-two\n"
                "+TWO\n"
                " three\n"
                " four\n"
            )
            start = worktree_diff.index("-two")
            res2 = applier.apply_selected_lines(worktree_diff, start, len("-two\n+TWO"), reverse=True)
            if not res2.success or target.read_bytes() != b"one\ntwo\nthree\nfour\n":
                fail("Revert of selected lines failed: " + res2.output)
            else:
                pass_("Revert of selected lines.")

        return ok, "\n".join(report_lines)
