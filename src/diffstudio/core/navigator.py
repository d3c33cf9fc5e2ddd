"""Diff Studio core: jump between change blocks of a displayed diff."""

from __future__ import annotations

from typing import List, Optional

from .classifier import LineClassifier
from .models import NavigationTarget


class ChangeNavigator:
    """
    Fresh linear scan per call; no cursor is kept between calls.

    Line numbers are 0-based indices into buffer.split("\\n"), the same
    numbering a QPlainTextEdit uses for its blocks.
    """

    # diff --git / index / --- / +++ of the displayed file
    PSEUDO_HEADER_LINES = 4
    SCROLL_MARGIN_NEXT = 4
    SCROLL_MARGIN_PREVIOUS = 3

    def __init__(self, classifier: Optional[LineClassifier] = None):
        self.classifier = classifier or LineClassifier()

    def _lines(self, text: str) -> List[str]:
        return text.split("\n") if text else []

    def next_change_block(self, text: str, current_line: int, total_lines: Optional[int] = None) -> Optional[NavigationTarget]:
        lines = self._lines(text)
        total = len(lines) if total_lines is None else min(total_lines, len(lines))
        fmt = (self.classifier.FORMAT_COMBINED if self.classifier.is_combined_diff(text)
               else self.classifier.FORMAT_UNIFIED)

        saw_gap = False
        start = max(self.PSEUDO_HEADER_LINES, current_line + 1)
        for line in range(start, total):
            if self.classifier.is_change_line(fmt, lines[line]):
                if saw_gap:
                    return NavigationTarget(
                        caret_line=line,
                        first_visible_line=max(line - self.SCROLL_MARGIN_NEXT, 0),
                    )
            else:
                saw_gap = True

        # no wrap to the end of the file
        return None

    def previous_change_block(self, text: str, current_line: int) -> Optional[NavigationTarget]:
        lines = self._lines(text)
        if not lines:
            return None
        start = min(current_line, len(lines) - 1)

        # climb to the top of the block holding the caret
        while start > 0 and lines[start].startswith(("+", "-")):
            start -= 1

        saw_change = False
        for line in range(start, 0, -1):
            content = lines[line]
            if content.startswith(("+", "-")) and not content.startswith(("++", "--")):
                saw_change = True
            elif saw_change:
                return NavigationTarget(
                    caret_line=line + 1,
                    first_visible_line=max(0, line - self.SCROLL_MARGIN_PREVIOUS),
                )

        return None
