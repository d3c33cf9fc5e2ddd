"""Diff Studio core: plain-text copies of diff content."""

from __future__ import annotations

import os
from typing import List, Optional, Dict, Any, Tuple

from .classifier import LineClassifier
from .lineendings import LineEndingNormalizer
from .models import Selection


class CopyFilter:
    """
    Copies diff text without the diff marker columns.

    Text before the first hunk (file names, mode lines) is never stripped.
    Options (all optional):
      - autocrlf: core.autocrlf value deciding line ending conversion
      - newline: target line ending when autocrlf is "true"
    """

    HUNK_MARKER = "\n@@"

    def __init__(self, classifier: Optional[LineClassifier] = None, normalizer: Optional[LineEndingNormalizer] = None):
        self.classifier = classifier or LineClassifier()
        self.normalizer = normalizer or LineEndingNormalizer()

    def _extract(self, text: str, start: int, length: int) -> Tuple[str, int]:
        """Returns (code, pos); no selection means the whole buffer."""
        sel = Selection(start, length).clamped(text)
        if sel.length == 0:
            return text, 0
        return text[sel.start:sel.end], sel.start

    def _finish(self, code: str, options: Optional[Dict[str, Any]]) -> str:
        options = options or {}
        return self.normalizer.apply_policy(
            code,
            options.get("autocrlf"),
            options.get("newline", os.linesep),
        )

    def _starts_mid_line(self, text: str, pos: int) -> bool:
        return pos > 0 and text[pos - 1] != "\n"

    def _remove_prefix(self, line: str, prefixes: Tuple[str, ...]) -> str:
        if not line.strip():
            return line
        for prefix in prefixes:
            if line.startswith(prefix):
                return line[len(prefix):]
        return line

    def copy_text(
        self,
        text: str,
        start: int = 0,
        length: int = 0,
        is_patch: bool = True,
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        code, pos = self._extract(text, start, length)
        if not code:
            return ""

        if is_patch:
            # header selected: copy diff extra chars verbatim
            if text.find(self.HUNK_MARKER) <= pos:
                if self._starts_mid_line(text, pos):
                    # artificial column, consumed by the prefix strip below
                    code = " " + code
                fmt = self.classifier.detect_format(text, is_patch=True)
                prefixes = self.classifier.prefixes_for(fmt)
                code = "\n".join(self._remove_prefix(ln, prefixes) for ln in code.split("\n"))

        return self._finish(code, options)

    def copy_excluding(
        self,
        text: str,
        start_char: str,
        start: int = 0,
        length: int = 0,
        is_patch: bool = True,
        options: Optional[Dict[str, Any]] = None,
    ) -> str:
        code, pos = self._extract(text, start, length)
        if not code:
            return ""

        if is_patch:
            if self._starts_mid_line(text, pos):
                code = " " + code

            lines: List[str] = [
                s for s in code.split("\n")
                if not s or s[0] != start_char or (len(s) > 2 and s[1] == s[0] and s[2] == s[0])
            ]
            if text.find(self.HUNK_MARKER) <= pos:
                lines = [s[1:] if s and s[0] in self.classifier.UNIFIED_PREFIXES else s for s in lines]
            code = "\n".join(lines)

        return self._finish(code, options)

    def copy_new_version(self, text: str, start: int = 0, length: int = 0, is_patch: bool = True,
                         options: Optional[Dict[str, Any]] = None) -> str:
        return self.copy_excluding(text, "-", start, length, is_patch, options)

    def copy_old_version(self, text: str, start: int = 0, length: int = 0, is_patch: bool = True,
                         options: Optional[Dict[str, Any]] = None) -> str:
        return self.copy_excluding(text, "+", start, length, is_patch, options)

    def copy_patch(self, text: str, start: int = 0, length: int = 0) -> str:
        code, _ = self._extract(text, start, length)
        return code
