"""Diff Studio core: shared data models."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


@dataclass
class Selection:
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def clamped(self, text: str) -> "Selection":
        start = min(max(self.start, 0), len(text))
        length = min(max(self.length, 0), len(text) - start)
        return Selection(start, length)


@dataclass
class NavigationTarget:
    caret_line: int
    first_visible_line: int


@dataclass
class DiffLine:
    tag: str  # " ", "+", "-", "\\"
    text: str
    start: int  # absolute offset of the first character
    end: int  # absolute offset of the terminating newline (or buffer end)

    @property
    def body(self) -> str:
        return self.text[1:]

    def overlaps(self, sel_start: int, sel_end: int) -> bool:
        return self.start < sel_end and self.end >= sel_start


@dataclass
class DiffHunk:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    section: str = ""  # function context after the closing @@
    lines: List[DiffLine] = field(default_factory=list)


@dataclass
class FileSection:
    header_lines: List[str] = field(default_factory=list)
    hunks: List[DiffHunk] = field(default_factory=list)

    def header_value(self, prefix: str) -> Optional[str]:
        for ln in self.header_lines:
            if ln.startswith(prefix):
                return ln[len(prefix):]
        return None


@dataclass
class ApplyResult:
    success: bool
    overall_message: str
    output: str = ""
    patch: bytes = b""
    summary: Dict[str, Any] = field(default_factory=dict)
    logs: List[Dict[str, Any]] = field(default_factory=list)

    def add_log(self, level: str, message: str, **fields: Any) -> None:
        entry = {"ts": time.time(), "level": level, "message": message}
        entry.update(fields)
        self.logs.append(entry)
