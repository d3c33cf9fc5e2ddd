"""Diff Studio UI: file/diff viewer widget."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from PyQt6.QtCore import Qt, QPoint, pyqtSignal
from PyQt6.QtGui import QAction, QFont, QKeyEvent, QKeySequence, QTextCursor
from PyQt6.QtWidgets import (
    QApplication, QMenu, QMessageBox, QPlainTextEdit, QToolBar, QVBoxLayout, QWidget
)

from ..core.classifier import LineClassifier
from ..core.copyfilter import CopyFilter
from ..core.git import GitCommandError, SelectionApplier
from ..core.hexdump import HexDumpFormatter
from ..core.models import ApplyResult, NavigationTarget
from ..core.navigator import ChangeNavigator
from .dialogs import ConflictReportDialog


class _DiffTextEdit(QPlainTextEdit):
    copyRequested = pyqtSignal()

    def keyPressEvent(self, event: QKeyEvent):
        if event.matches(QKeySequence.StandardKey.Copy):
            self.copyRequested.emit()
            return
        super().keyPressEvent(event)


class FileViewer(QWidget):
    """
    Read-only view of a file or a diff. Buffer text, caret and selection are
    handed to the core on each action; nothing is cached between actions.
    """

    logEntry = pyqtSignal(dict)
    textLoaded = pyqtSignal()
    changesApplied = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)

        self.classifier = LineClassifier()
        self.navigator = ChangeNavigator(self.classifier)
        self.copier = CopyFilter(self.classifier)
        self.hexdump = HexDumpFormatter()

        self.applier: Optional[SelectionApplier] = None
        self.conflict_handler: Optional[Callable[[], bool]] = None
        self.file_name: str = ""
        self.is_patch = False
        self.options: Dict[str, Any] = {
            "autocrlf": "false",
            "newline": os.linesep,
            "encoding": "utf-8",
        }

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.toolbar = QToolBar("Viewer")
        self.toolbar.setMovable(False)
        layout.addWidget(self.toolbar)

        self.editor = _DiffTextEdit()
        self.editor.setReadOnly(True)
        self.editor.setFont(QFont("Consolas", 10))
        self.editor.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.editor.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.editor.customContextMenuRequested.connect(self._show_context_menu)
        self.editor.copyRequested.connect(self.copy_selection)
        layout.addWidget(self.editor)

        self._build_actions()
        self._refresh_actions()

    # ---------------- UI Construction ----------------

    def _action(self, text: str, slot, shortcut: Optional[str] = None) -> QAction:
        act = QAction(text, self)
        act.triggered.connect(slot)
        if shortcut:
            act.setShortcut(QKeySequence(shortcut))
            act.setShortcutContext(Qt.ShortcutContext.WidgetWithChildrenShortcut)
        self.addAction(act)
        return act

    def _build_actions(self):
        self.act_next_change = self._action("Next Change", self.next_change, "Alt+Down")
        self.act_previous_change = self._action("Previous Change", self.previous_change, "Alt+Up")
        self.act_copy = self._action("Copy", self.copy_selection)
        self.act_copy_patch = self._action("Copy Patch", self.copy_patch)
        self.act_copy_new = self._action("Copy New Version", self.copy_new_version)
        self.act_copy_old = self._action("Copy Old Version", self.copy_old_version)
        self.act_apply_lines = self._action("Apply Selected Lines", self.apply_selected_lines)
        self.act_revert_lines = self._action("Revert Selected Lines", self.revert_selected_lines)
        self.act_cherry_pick_all = self._action("Cherry-pick All Changes", self.cherry_pick_all_changes)

        for a in [self.act_previous_change, self.act_next_change]:
            self.toolbar.addAction(a)

    def _show_context_menu(self, pos: QPoint):
        menu = QMenu(self)
        menu.addAction(self.act_copy)
        if self.is_patch:
            menu.addAction(self.act_copy_patch)
            menu.addAction(self.act_copy_new)
            menu.addAction(self.act_copy_old)
            menu.addSeparator()
            menu.addAction(self.act_apply_lines)
            menu.addAction(self.act_revert_lines)
            menu.addAction(self.act_cherry_pick_all)
            menu.addSeparator()
            menu.addAction(self.act_previous_change)
            menu.addAction(self.act_next_change)
        menu.exec(self.editor.mapToGlobal(pos))

    def _refresh_actions(self):
        can_apply = self.is_patch and self.applier is not None
        for a in (self.act_next_change, self.act_previous_change,
                  self.act_copy_patch, self.act_copy_new, self.act_copy_old):
            a.setEnabled(self.is_patch)
        for a in (self.act_apply_lines, self.act_revert_lines, self.act_cherry_pick_all):
            a.setEnabled(can_apply)

    # ---------------- Utilities ----------------

    def _log(self, level: str, message: str, **fields: Any) -> None:
        entry = {"ts": time.time(), "level": level, "message": message}
        entry.update(fields)
        self.logEntry.emit(entry)

    def _snapshot(self) -> Tuple[str, int, int]:
        cursor = self.editor.textCursor()
        start = cursor.selectionStart()
        return self.editor.toPlainText(), start, cursor.selectionEnd() - start

    def _set_clipboard(self, text: str) -> None:
        if not text:
            return
        clipboard = QApplication.clipboard()
        if clipboard is not None:
            clipboard.setText(text)

    def _go_to(self, target: NavigationTarget) -> None:
        block = self.editor.document().findBlockByNumber(target.caret_line)
        self.editor.setTextCursor(QTextCursor(block))
        self.editor.verticalScrollBar().setValue(target.first_visible_line)

    def set_options(self, options: Dict[str, Any]) -> None:
        self.options.update(options)

    def set_applier(self, applier: Optional[SelectionApplier]) -> None:
        self.applier = applier
        self._refresh_actions()

    # ---------------- Loading ----------------

    def view_text(self, file_name: str, text: str, is_patch: bool = False) -> None:
        self.file_name = file_name
        self.is_patch = is_patch
        self.editor.setPlainText(text)
        self._refresh_actions()
        self.textLoaded.emit()

    def view_patch(self, file_name: str, text: str) -> None:
        self.view_text(file_name, text, is_patch=True)

    def view_binary(self, file_name: str, data: bytes) -> None:
        try:
            summary = self.hexdump.binary_summary(file_name, data)
        except Exception as e:
            self._log("WARN", "Binary preview failed.", file=file_name, error=str(e))
            summary = f"Binary file: {file_name} (Detected)"
        self.view_text(file_name, summary, is_patch=False)

    def view_file(self, path: str) -> None:
        p = Path(path)
        data = p.read_bytes()
        if self.hexdump.is_binary_content(data):
            self.view_binary(p.name, data)
            self._log("INFO", "Loaded binary file.", file=str(p), bytes=len(data))
            return
        text = data.decode(self.options.get("encoding", "utf-8"), errors="replace")
        self.view_text(p.name, text, is_patch=False)
        self._log("INFO", "Loaded file.", file=str(p), chars=len(text))

    # ---------------- Navigation ----------------

    def next_change(self):
        if not self.is_patch:
            return
        text = self.editor.toPlainText()
        current = self.editor.textCursor().blockNumber()
        target = self.navigator.next_change_block(text, current, self.editor.blockCount())
        if target is not None:
            self._go_to(target)

    def previous_change(self):
        if not self.is_patch:
            return
        text = self.editor.toPlainText()
        target = self.navigator.previous_change_block(text, self.editor.textCursor().blockNumber())
        if target is not None:
            self._go_to(target)

    # ---------------- Copy ----------------

    def copy_selection(self):
        text, start, length = self._snapshot()
        self._set_clipboard(self.copier.copy_text(text, start, length, self.is_patch, self.options))

    def copy_patch(self):
        text, start, length = self._snapshot()
        self._set_clipboard(self.copier.copy_patch(text, start, length))

    def copy_new_version(self):
        text, start, length = self._snapshot()
        self._set_clipboard(self.copier.copy_new_version(text, start, length, self.is_patch, self.options))

    def copy_old_version(self):
        text, start, length = self._snapshot()
        self._set_clipboard(self.copier.copy_old_version(text, start, length, self.is_patch, self.options))

    # ---------------- Apply ----------------

    def apply_selected_lines(self):
        _, start, length = self._snapshot()
        self._apply(lambda text, enc: self.applier.apply_selected_lines(
            text, start, length, reverse=False, encoding=enc, conflict_handler=self.conflict_handler))

    def revert_selected_lines(self):
        _, start, length = self._snapshot()
        self._apply(lambda text, enc: self.applier.apply_selected_lines(
            text, start, length, reverse=True, encoding=enc, conflict_handler=self.conflict_handler))

    def cherry_pick_all_changes(self):
        self._apply(lambda text, enc: self.applier.cherry_pick_all_changes(
            text, encoding=enc, conflict_handler=self.conflict_handler))

    def _apply(self, run: Callable[[str, str], ApplyResult]) -> None:
        if self.applier is None:
            QMessageBox.information(self, "Apply", "Open a repository first (Open Repository…).")
            return

        encoding = self.options.get("encoding", "utf-8")
        try:
            res = run(self.editor.toPlainText(), encoding)
        except GitCommandError as e:
            self._log("ERROR", "git could not be run.", error=str(e))
            QMessageBox.critical(self, "Apply Failed", f"Could not run git:\n{e}")
            return

        for entry in res.logs:
            self.logEntry.emit(entry)

        if not res.success:
            ConflictReportDialog(self, res.overall_message, res.output,
                                 res.patch.decode(encoding, errors="replace")).exec()
            return
        if res.summary.get("applied"):
            self.changesApplied.emit()
