"""Diff Studio core: diff format detection & line role classification."""

from __future__ import annotations

import re
from typing import Tuple


class LineClassifier:
    """
    Leading-character sniffing over displayed diff text.

    Formats:
      - Plain: the view shows a file, no diff roles.
      - Unified: single column of " ", "-", "+" markers.
      - Combined: one marker column per parent (merge diffs, two parents).
    """

    FORMAT_PLAIN = "Plain"
    FORMAT_UNIFIED = "UnifiedDiff"
    FORMAT_COMBINED = "CombinedDiff"

    ROLE_CONTEXT = "context"
    ROLE_ADDED = "added"
    ROLE_REMOVED = "removed"
    ROLE_HEADER = "header"
    ROLE_OTHER = "other"

    UNIFIED_PREFIXES = (" ", "-", "+")
    COMBINED_PREFIXES = ("  ", "++", "+ ", " +", "--", "- ", " -")

    UNIFIED_HEADERS = ("@@", "diff ", "index ")
    COMBINED_HEADERS = ("@@@", "diff ", "index ")

    RE_COMBINED = re.compile(r"^(?:diff --(?:cc|combined) |@{3,} )", re.MULTILINE)

    def is_combined_diff(self, text: str) -> bool:
        if not text:
            return False
        return self.RE_COMBINED.search(text) is not None

    def detect_format(self, text: str, is_patch: bool = True) -> str:
        if not is_patch:
            return self.FORMAT_PLAIN
        if self.is_combined_diff(text):
            return self.FORMAT_COMBINED
        return self.FORMAT_UNIFIED

    def prefixes_for(self, fmt: str) -> Tuple[str, ...]:
        if fmt == self.FORMAT_COMBINED:
            return self.COMBINED_PREFIXES
        if fmt == self.FORMAT_UNIFIED:
            return self.UNIFIED_PREFIXES
        return ()

    def classify_line(self, fmt: str, line: str) -> str:
        if not line or fmt == self.FORMAT_PLAIN:
            return self.ROLE_OTHER

        if fmt == self.FORMAT_COMBINED:
            if line.startswith(self.COMBINED_HEADERS):
                return self.ROLE_HEADER
            if line.startswith("  "):
                return self.ROLE_CONTEXT
            if line.startswith(("+", " +")):
                return self.ROLE_ADDED
            if line.startswith(("-", " -")):
                return self.ROLE_REMOVED
            return self.ROLE_OTHER

        if line.startswith(self.UNIFIED_HEADERS):
            return self.ROLE_HEADER
        tag = line[0]
        if tag == "+":
            return self.ROLE_ADDED
        if tag == "-":
            return self.ROLE_REMOVED
        if tag == " ":
            return self.ROLE_CONTEXT
        return self.ROLE_OTHER

    def is_change_line(self, fmt: str, line: str) -> bool:
        return self.classify_line(fmt, line) in (self.ROLE_ADDED, self.ROLE_REMOVED)
