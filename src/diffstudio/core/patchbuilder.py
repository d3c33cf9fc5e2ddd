"""Diff Studio core: build applyable patches from selected diff lines."""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from .classifier import LineClassifier
from .models import DiffHunk, DiffLine, FileSection


class PatchBuilder:
    """
    Turns a (start, length) selection over displayed diff text into a
    minimal unified diff that `git apply` accepts.

    Forward:  selected +/- kept, unselected "-" become context, unselected "+" dropped.
    Reverse:  +/- swapped first, then the forward rule.
    """

    RE_DIFF_GIT = re.compile(r"^diff --git (.+?) (.+?)\s*$")
    RE_HUNK = re.compile(r"^@@\s+\-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@(.*)$")

    DEV_NULL = "/dev/null"
    DEFAULT_MODE = "100644"

    FORWARD_META_PREFIXES = (
        "old mode ", "new mode ", "similarity index ", "dissimilarity index ",
        "rename from ", "rename to ", "copy from ", "copy to ",
    )

    def __init__(self, classifier: Optional[LineClassifier] = None):
        self.classifier = classifier or LineClassifier()

    # ---------------- Public API ----------------

    def build_from_selection(
        self,
        text: str,
        start: int,
        length: int,
        keep_header: bool,
        encoding: str = "utf-8",
        reverse_lines: bool = False,
    ) -> bytes:
        return self._build(text, start, length, keep_header, encoding, reverse_lines)

    def build_reset_worktree_lines(self, text: str, start: int, length: int, encoding: str = "utf-8") -> bytes:
        return self._build(text, start, length, False, encoding, True)

    # ---------------- Parsing ----------------

    def parse(self, text: str) -> List[FileSection]:
        sections: List[FileSection] = []
        current: Optional[FileSection] = None
        hunk: Optional[DiffHunk] = None
        remaining_old = remaining_new = 0

        pos = 0
        for raw in text.split("\n"):
            start = pos
            end = pos + len(raw)
            pos = end + 1
            if start >= len(text):
                break

            # hunk body continues until both sides of the header are consumed
            if hunk is not None:
                if raw.startswith("\\"):
                    hunk.lines.append(DiffLine("\\", raw, start, end))
                    continue
                if remaining_old > 0 or remaining_new > 0:
                    tag = raw[0] if raw else " "
                    if tag in (" ", "+", "-"):
                        hunk.lines.append(DiffLine(tag, raw if raw else " ", start, end))
                        if tag != "+":
                            remaining_old -= 1
                        if tag != "-":
                            remaining_new -= 1
                        continue
                hunk = None

            m = self.RE_HUNK.match(raw)
            if m:
                if current is None:
                    current = FileSection()
                    sections.append(current)
                hunk = DiffHunk(
                    old_start=int(m.group(1)),
                    old_count=int(m.group(2)) if m.group(2) is not None else 1,
                    new_start=int(m.group(3)),
                    new_count=int(m.group(4)) if m.group(4) is not None else 1,
                    section=m.group(5) or "",
                )
                remaining_old = hunk.old_count
                remaining_new = hunk.new_count
                current.hunks.append(hunk)
                continue

            if current is None or current.hunks or raw.startswith("diff "):
                current = FileSection()
                sections.append(current)
            current.header_lines.append(raw)

        return sections

    def _strip_prefix_ab(self, p: str) -> str:
        p = p.strip()
        if p.startswith("a/") and len(p) > 2:
            return p[2:]
        if p.startswith("b/") and len(p) > 2:
            return p[2:]
        return p

    def _path_from_header(self, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        # Path ends at first TAB if present; otherwise full remainder
        path = value.split("\t", 1)[0].strip()
        if path == self.DEV_NULL:
            return self.DEV_NULL
        return self._strip_prefix_ab(path)

    def _section_paths(self, section: FileSection) -> Tuple[Optional[str], Optional[str]]:
        old_path = self._path_from_header(section.header_value("--- "))
        new_path = self._path_from_header(section.header_value("+++ "))
        if old_path is None or new_path is None:
            for ln in section.header_lines:
                m = self.RE_DIFF_GIT.match(ln)
                if m:
                    old_path = old_path or self._strip_prefix_ab(m.group(1))
                    new_path = new_path or self._strip_prefix_ab(m.group(2))
                    break
        return old_path, new_path

    def _file_mode(self, section: FileSection) -> str:
        for prefix in ("new file mode ", "deleted file mode ", "new mode ", "old mode "):
            value = section.header_value(prefix)
            if value:
                return value.strip()
        return self.DEFAULT_MODE

    # ---------------- Building ----------------

    def _build(self, text: str, start: int, length: int, keep_header: bool, encoding: str, reverse: bool) -> bytes:
        if not text or length <= 0:
            return b""
        # combined diffs have no single preimage to apply against
        if self.classifier.is_combined_diff(text):
            return b""

        sel_start = max(start, 0)
        sel_end = min(start + length, len(text))
        if sel_end <= sel_start:
            return b""

        out: List[str] = []
        for section in self.parse(text):
            hunk_lines: List[str] = []
            offset = 0
            new_side_nonempty = False

            for hunk in section.hunks:
                rebuilt = self._rebuild_hunk(hunk, sel_start, sel_end, reverse, offset)
                if rebuilt is None:
                    if any(ln.tag != "\\" for ln in hunk.lines):
                        new_side_nonempty = True
                    continue
                lines, old_count, new_count = rebuilt
                if new_count > 0:
                    new_side_nonempty = True
                offset += new_count - old_count
                hunk_lines.extend(lines)

            if not hunk_lines:
                continue
            if keep_header:
                out.extend(section.header_lines)
            else:
                out.extend(self._rebuild_header(section, reverse, new_side_nonempty))
            out.extend(hunk_lines)

        if not out:
            return b""
        return ("\n".join(out) + "\n").encode(encoding, errors="replace")

    def _rebuild_hunk(
        self,
        hunk: DiffHunk,
        sel_start: int,
        sel_end: int,
        reverse: bool,
        offset: int,
    ) -> Optional[Tuple[List[str], int, int]]:
        body: List[str] = []
        has_change = False
        last_kept = False
        old_count = 0
        new_count = 0

        for ln in hunk.lines:
            if ln.tag == "\\":
                # "\ No newline at end of file" belongs to the preceding line
                if last_kept:
                    body.append(ln.text)
                continue

            tag = ln.tag
            if reverse:
                tag = {"+": "-", "-": "+"}.get(tag, tag)
            selected = ln.overlaps(sel_start, sel_end)

            if tag == "+" and not selected:
                last_kept = False
                continue
            if tag == "-" and not selected:
                tag = " "
            if tag != " ":
                has_change = True

            body.append(tag + ln.body)
            last_kept = True
            if tag != "+":
                old_count += 1
            if tag != "-":
                new_count += 1

        if not has_change:
            return None

        old_start = hunk.new_start if reverse else hunk.old_start
        if old_count == 0:
            new_start = old_start + offset + 1
        elif new_count == 0:
            new_start = old_start + offset - 1
        else:
            new_start = old_start + offset
        new_start = max(new_start, 0)

        header = f"@@ -{old_start},{old_count} +{new_start},{new_count} @@{hunk.section}"
        return [header] + body, old_count, new_count

    def _rebuild_header(self, section: FileSection, reverse: bool, new_side_nonempty: bool) -> List[str]:
        if not section.header_lines:
            return []

        old_path, new_path = self._section_paths(section)
        old_missing = old_path == self.DEV_NULL
        new_missing = new_path == self.DEV_NULL
        if reverse:
            # both sides name the file as it is now
            current = new_path if not new_missing else old_path
            old_path = new_path = current
            old_missing, new_missing = new_missing, old_missing
        if old_missing:
            old_path = new_path
        if new_missing:
            new_path = old_path
            if new_side_nonempty:
                # partially selected deletion leaves the file in place
                new_missing = False

        header: List[str] = []
        diff_git_seen = any(self.RE_DIFF_GIT.match(ln) for ln in section.header_lines)
        if diff_git_seen:
            if reverse:
                header.append(f"diff --git a/{old_path} b/{new_path}")
            else:
                header.extend(ln for ln in section.header_lines if self.RE_DIFF_GIT.match(ln))

        if not reverse:
            header.extend(ln for ln in section.header_lines if ln.startswith(self.FORWARD_META_PREFIXES))

        mode = self._file_mode(section)
        if old_missing:
            header.append(f"new file mode {mode}")
        elif new_missing:
            header.append(f"deleted file mode {mode}")

        if not reverse:
            header.extend(ln for ln in section.header_lines if ln.startswith("index "))

        header.append("--- " + (self.DEV_NULL if old_missing else f"a/{old_path}"))
        header.append("+++ " + (self.DEV_NULL if new_missing else f"b/{new_path}"))
        return header
