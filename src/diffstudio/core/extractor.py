"""Diff Studio core: selection -> patch bytes."""

from __future__ import annotations

from typing import Optional

from .models import Selection
from .patchbuilder import PatchBuilder


class SelectionPatchExtractor:
    """
    Forward extracts the shown change for the selected lines (cherry-pick).
    Reverse extracts the patch that undoes it in the working tree (revert).
    An empty result means nothing applyable was selected.
    """

    def __init__(self, builder: Optional[PatchBuilder] = None):
        self.builder = builder or PatchBuilder()

    def extract_patch(self, text: str, start: int, length: int, reverse: bool, encoding: str = "utf-8") -> bytes:
        sel = Selection(start, length).clamped(text)
        if sel.length == 0:
            return b""

        if reverse:
            return self.builder.build_reset_worktree_lines(text, sel.start, sel.length, encoding)
        return self.builder.build_from_selection(
            text, sel.start, sel.length,
            keep_header=False, encoding=encoding, reverse_lines=False,
        )
