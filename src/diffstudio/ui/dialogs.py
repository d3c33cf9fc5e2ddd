"""Diff Studio UI: dialogs."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QPlainTextEdit,
    QWidget, QToolButton
)


class ConflictReportDialog(QDialog):
    """git apply output verbatim, with the rejected patch behind a toggle."""

    def __init__(self, parent, title: str, output: str, patch_text: str):
        super().__init__(parent)
        self.setWindowTitle("Apply Selected Lines")
        self.resize(900, 520)

        layout = QVBoxLayout(self)

        title_lbl = QLabel(f"<b>{title}</b>")
        layout.addWidget(title_lbl)

        layout.addWidget(QLabel("<b>git output:</b>"))
        out_edit = self._readonly_text(output)
        layout.addWidget(out_edit)

        toggle = QToolButton()
        toggle.setText("Patch")
        toggle.setCheckable(True)
        toggle.setChecked(False)
        toggle.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextOnly)

        details_widget = QWidget()
        details_layout = QVBoxLayout(details_widget)
        details_layout.setContentsMargins(0, 0, 0, 0)
        details_layout.addWidget(self._readonly_text(patch_text))
        details_widget.setVisible(False)

        toggle.toggled.connect(details_widget.setVisible)
        layout.addWidget(toggle)
        layout.addWidget(details_widget)

        btns = QHBoxLayout()
        btns.addStretch(1)
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        btns.addWidget(close_btn)
        layout.addLayout(btns)

    def _readonly_text(self, text: str) -> QPlainTextEdit:
        edit = QPlainTextEdit()
        edit.setReadOnly(True)
        edit.setFont(QFont("Consolas", 10))
        edit.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        edit.setPlainText(text)
        return edit
