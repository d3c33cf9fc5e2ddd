"""Diff Studio UI: main window."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Optional, Dict, Any

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QFont
from PyQt6.QtWidgets import (
    QMainWindow, QToolBar, QStatusBar, QTableView, QDockWidget,
    QWidget, QFileDialog, QMessageBox, QComboBox, QFormLayout,
    QHeaderView, QAbstractItemView
)

from ..core.git import GitRunner, GitCommandError, SelectionApplier
from ..core.selftests import DiffStudioSelfTests

from .file_viewer import FileViewer
from .models import LogTableModel


class MainWindow(QMainWindow):
    AUTOCRLF_FROM_REPO = "From repository"
    ENCODINGS = ["utf-8", "latin-1", "cp1252", "utf-16"]
    DIFF_SUFFIXES = (".diff", ".patch")

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Diff Studio")
        self.resize(1100, 720)

        # Session state
        self.repo_root: Optional[str] = None
        self.runner: Optional[GitRunner] = None
        self.repo_autocrlf: str = "false"

        app_font = QFont("Consolas", 10)
        self.setFont(app_font)

        self._build_central()
        self._build_toolbar()
        self._build_docks()
        self._build_status()

        self._push_options()
        self._refresh_actions()
        self._log_info("Ready.", component="ui")

    # ---------------- UI Construction ----------------

    def _build_toolbar(self):
        tb = QToolBar("Main")
        tb.setMovable(False)
        self.addToolBar(tb)

        self.act_open = QAction("Open File", self)
        self.act_open.triggered.connect(self._open_file)

        self.act_open_diff = QAction("Open Diff", self)
        self.act_open_diff.triggered.connect(self._open_diff)

        self.act_open_repo = QAction("Open Repository", self)
        self.act_open_repo.triggered.connect(self._open_repository)

        self.act_worktree_diff = QAction("Working Tree Diff", self)
        self.act_worktree_diff.triggered.connect(lambda: self._load_repo_diff(cached=False))

        self.act_staged_diff = QAction("Staged Diff", self)
        self.act_staged_diff.triggered.connect(lambda: self._load_repo_diff(cached=True))

        for a in [
            self.act_open, self.act_open_diff, self.act_open_repo,
            self.act_worktree_diff, self.act_staged_diff,
            self.viewer.act_apply_lines, self.viewer.act_revert_lines,
            self.viewer.act_cherry_pick_all,
        ]:
            tb.addAction(a)

    def _build_central(self):
        self.viewer = FileViewer(self)
        self.viewer.logEntry.connect(self._on_log_entry)
        self.viewer.changesApplied.connect(self._on_changes_applied)
        self.viewer.textLoaded.connect(self._on_text_loaded)
        self.setCentralWidget(self.viewer)

    def _build_docks(self):
        # Log dock
        self.log_dock = QDockWidget("Log", self)
        self.log_dock.setAllowedAreas(Qt.DockWidgetArea.BottomDockWidgetArea)
        self.log_view = QTableView()
        self.log_model = LogTableModel()
        self.log_view.setModel(self.log_model)
        self.log_view.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.log_view.setWordWrap(False)
        self.log_view.horizontalHeader().setStretchLastSection(True)
        self.log_view.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        self.log_dock.setWidget(self.log_view)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, self.log_dock)
        self.log_dock.setVisible(False)

        # Options dock
        self.opt_dock = QDockWidget("Options", self)
        opt_widget = QWidget()
        form = QFormLayout(opt_widget)

        self.cmb_autocrlf = QComboBox()
        self.cmb_autocrlf.addItems([self.AUTOCRLF_FROM_REPO, "true", "false", "input"])
        self.cmb_autocrlf.currentIndexChanged.connect(self._push_options)

        self.cmb_encoding = QComboBox()
        self.cmb_encoding.addItems(self.ENCODINGS)
        self.cmb_encoding.currentIndexChanged.connect(self._push_options)

        form.addRow("core.autocrlf", self.cmb_autocrlf)
        form.addRow("Encoding", self.cmb_encoding)

        self.opt_dock.setWidget(opt_widget)
        self.addDockWidget(Qt.DockWidgetArea.RightDockWidgetArea, self.opt_dock)
        self.opt_dock.setVisible(False)

        # View menu toggles docks; Help menu with self tests
        view_menu = self.menuBar().addMenu("View")
        view_menu.addAction(self.opt_dock.toggleViewAction())
        view_menu.addAction(self.log_dock.toggleViewAction())
        act_clear_log = QAction("Clear Log", self)
        act_clear_log.triggered.connect(self.log_model.clear)
        view_menu.addAction(act_clear_log)

        self.menu = self.menuBar().addMenu("Help")
        act_selftests = QAction("Run Self Tests", self)
        act_selftests.triggered.connect(self._run_selftests_ui)
        self.menu.addAction(act_selftests)

    def _build_status(self):
        sb = QStatusBar()
        self.setStatusBar(sb)
        self._set_status("Nothing loaded.", repo="")

    # ---------------- Utilities ----------------

    def _options(self) -> Dict[str, Any]:
        autocrlf = self.cmb_autocrlf.currentText()
        if autocrlf == self.AUTOCRLF_FROM_REPO:
            autocrlf = self.repo_autocrlf
        return {
            "autocrlf": autocrlf,
            "newline": os.linesep,
            "encoding": self.cmb_encoding.currentText(),
        }

    def _push_options(self, *_args) -> None:
        self.viewer.set_options(self._options())

    def _set_status(self, summary: str, repo: str) -> None:
        self.statusBar().showMessage(f"{summary}    |    Repository: {repo or '(none)'}".strip())

    def _on_log_entry(self, entry: Dict[str, Any]) -> None:
        self.log_model.append(entry)
        # Keep log dock optional; if an error occurs, show it
        if entry.get("level") in ("ERROR", "WARN"):
            self.log_dock.setVisible(True)

    def _log(self, level: str, message: str, **fields: Any) -> None:
        entry = {"ts": time.time(), "level": level, "message": message}
        entry.update(fields)
        self._on_log_entry(entry)

    def _log_info(self, message: str, **fields: Any) -> None:
        self._log("INFO", message, **fields)

    def _log_error(self, message: str, **fields: Any) -> None:
        self._log("ERROR", message, **fields)

    def _refresh_actions(self):
        has_repo = self.runner is not None
        self.act_worktree_diff.setEnabled(has_repo)
        self.act_staged_diff.setEnabled(has_repo)

    # ---------------- Actions ----------------

    def _open_file(self):
        fn, _ = QFileDialog.getOpenFileName(self, "Open File", self.repo_root or "", "All Files (*.*)")
        if fn:
            self.load_file(fn)

    def _open_diff(self):
        fn, _ = QFileDialog.getOpenFileName(self, "Open Diff", self.repo_root or "", "Diff/Patch (*.diff *.patch *.txt);;All Files (*.*)")
        if fn:
            self.load_diff(fn)

    def open_path(self, path: str) -> bool:
        """Shows a file or, by suffix, a diff; used for the command line argument."""
        if Path(path).suffix.lower() in self.DIFF_SUFFIXES:
            return self.load_diff(path)
        return self.load_file(path)

    def load_file(self, fn: str) -> bool:
        try:
            self.viewer.view_file(fn)
        except Exception as e:
            QMessageBox.critical(self, "Open Failed", f"Could not open file:\n{e}")
            self._log_error("Could not open file.", file=fn, error=str(e))
            return False
        return True

    def load_diff(self, fn: str) -> bool:
        try:
            data = Path(fn).read_bytes()
        except Exception as e:
            QMessageBox.critical(self, "Open Failed", f"Could not read diff:\n{e}")
            self._log_error("Could not read diff.", file=fn, error=str(e))
            return False

        text = data.decode(self._options()["encoding"], errors="replace")
        self.viewer.view_patch(Path(fn).name, text)
        self._log_info("Loaded diff.", file=fn, combined=self.viewer.classifier.is_combined_diff(text))
        return True

    def _open_repository(self):
        fn = QFileDialog.getExistingDirectory(self, "Select Repository Root", "")
        if not fn:
            return
        root = str(Path(fn).resolve())
        runner = GitRunner(root)
        try:
            self.repo_autocrlf = runner.autocrlf()
        except GitCommandError as e:
            QMessageBox.critical(self, "Open Repository", f"Could not run git:\n{e}")
            self._log_error("Could not run git.", root=root, error=str(e))
            return

        self.repo_root = root
        self.runner = runner
        self.viewer.set_applier(SelectionApplier(runner))
        self._push_options()
        self._log_info("Opened repository.", root=root, autocrlf=self.repo_autocrlf)
        self._set_status("Repository opened.", repo=root)
        self._refresh_actions()

    def _load_repo_diff(self, cached: bool):
        if self.runner is None:
            return
        try:
            text = self.runner.diff(cached=cached, encoding=self._options()["encoding"])
        except GitCommandError as e:
            QMessageBox.critical(self, "Diff Failed", f"Could not get diff:\n{e}")
            self._log_error("git diff failed.", cached=cached, error=str(e))
            return
        label = "staged" if cached else "working tree"
        self.viewer.view_patch(label, text)
        self._log_info("Loaded repository diff.", kind=label, chars=len(text))

    def _on_text_loaded(self):
        kind = "Diff" if self.viewer.is_patch else "File"
        self._set_status(f"{kind}: {self.viewer.file_name}", repo=self.repo_root or "")

    def _on_changes_applied(self):
        # working tree moved; refresh the shown worktree diff
        if self.runner is not None and self.viewer.file_name == "working tree":
            self._load_repo_diff(cached=False)

    def _run_selftests_ui(self):
        ok, report = DiffStudioSelfTests.run()
        self._log("INFO" if ok else "ERROR", "Self tests finished.", ok=ok)
        if ok:
            QMessageBox.information(self, "Self Tests", report)
        else:
            QMessageBox.warning(self, "Self Tests", report)

    # ---------------- Close Event ----------------

    def closeEvent(self, event):
        event.accept()
