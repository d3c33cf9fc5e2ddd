"""Diff Studio UI: Qt models for the log dock."""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Dict, List, Tuple

from PyQt6.QtCore import Qt, QAbstractTableModel, QModelIndex
from PyQt6.QtGui import QBrush, QColor

LogEntry = Dict[str, Any]


def _format_ts(entry: LogEntry) -> str:
    return time.strftime("%H:%M:%S", time.localtime(entry.get("ts", 0.0)))


def log_details(entry: LogEntry) -> Dict[str, Any]:
    """Fields beyond ts/level/message, in insertion order."""
    return {k: v for k, v in entry.items() if k not in LogTableModel.RESERVED}


def _format_details(entry: LogEntry) -> str:
    return ", ".join(f"{k}={v}" for k, v in log_details(entry).items())


class LogTableModel(QAbstractTableModel):
    """
    One row per structured log entry ({"ts", "level", "message", **fields}).
    Rows are colored by level; the tooltip carries the extra fields as JSON.
    """

    RESERVED = ("ts", "level", "message")

    # (header, renderer)
    COLUMNS: Tuple[Tuple[str, Callable[[LogEntry], str]], ...] = (
        ("Time", _format_ts),
        ("Level", lambda e: str(e.get("level", ""))),
        ("Message", lambda e: str(e.get("message", ""))),
        ("Details", _format_details),
    )

    LEVEL_COLORS = {
        "WARN": QColor(150, 90, 0),
        "ERROR": QColor(170, 20, 20),
    }

    def __init__(self):
        super().__init__()
        self._entries: List[LogEntry] = []
        self._level_brushes = {lvl: QBrush(c) for lvl, c in self.LEVEL_COLORS.items()}

    def rowCount(self, parent=QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._entries)

    def columnCount(self, parent=QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self.COLUMNS)

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole):
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return self.COLUMNS[section][0] if 0 <= section < len(self.COLUMNS) else ""
        return str(section + 1)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        entry = self._entries[index.row()]

        if role == Qt.ItemDataRole.DisplayRole:
            return self.COLUMNS[index.column()][1](entry)
        if role == Qt.ItemDataRole.ForegroundRole:
            return self._level_brushes.get(entry.get("level"))
        if role == Qt.ItemDataRole.ToolTipRole:
            details = log_details(entry)
            if not details:
                return None
            try:
                return json.dumps(details, indent=2)
            except (TypeError, ValueError):
                return str(details)
        return None

    def append(self, entry: LogEntry) -> None:
        row = len(self._entries)
        self.beginInsertRows(QModelIndex(), row, row)
        self._entries.append(entry)
        self.endInsertRows()

    def clear(self) -> None:
        self.beginResetModel()
        self._entries = []
        self.endResetModel()
