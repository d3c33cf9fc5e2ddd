"""Diff Studio core: line ending policy for copied text."""

from __future__ import annotations

import os
from typing import Optional


class LineEndingNormalizer:
    AUTOCRLF_TRUE = "true"

    def normalize(self, text: str, newline: str = os.linesep) -> str:
        if "\r\n" in text:
            # committed with a different autocrlf setting
            return text.replace("\r\n", newline)
        if "\r" in text:
            # classic Mac endings
            return text.replace("\r", newline)
        return text.replace("\n", newline)

    def apply_policy(self, text: str, autocrlf: Optional[str], newline: str = os.linesep) -> str:
        if str(autocrlf or "").strip().lower() != self.AUTOCRLF_TRUE:
            return text
        return self.normalize(text, newline)
