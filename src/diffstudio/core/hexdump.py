"""Diff Studio core: hex/ASCII dump for binary previews."""

from __future__ import annotations

import unicodedata
from typing import List, Union


class HexDumpFormatter:
    """
    Fixed-width dump, one row per column_width * column_count bytes:

      0000    48 65 6C 6C 6F 00 01 02  03 04 05 06 07 08 09 0A    Hello... ........
    """

    OFFSET_SEP = "    "
    REGION_SEP = "    "

    def format(self, data: bytes, column_width: int = 8, column_count: int = 2) -> str:
        if not data:
            return ""

        row_size = column_width * column_count
        rows: List[str] = []
        for base in range(0, len(data), row_size):
            chunk = data[base:base + row_size]

            hex_groups = []
            ascii_groups = []
            for col in range(column_count):
                cells = []
                chars = []
                for j in range(column_width):
                    idx = col * column_width + j
                    if idx < len(chunk):
                        cells.append(f"{chunk[idx]:02X}")
                        chars.append(self._printable(chunk[idx]))
                    else:
                        # keep the row width stable for the final partial row
                        cells.append("  ")
                        chars.append(" ")
                hex_groups.append(" ".join(cells))
                ascii_groups.append("".join(chars))

            rows.append(
                f"{base:04X}{self.OFFSET_SEP}"
                + "  ".join(hex_groups)
                + self.REGION_SEP
                + " ".join(ascii_groups)
            )
        return "\n".join(rows)

    def _printable(self, value: int) -> str:
        ch = chr(value)
        return "." if unicodedata.category(ch) == "Cc" else ch

    def is_binary_content(self, data: Union[bytes, str]) -> bool:
        if isinstance(data, str):
            return "\0" in data
        return b"\0" in data

    def binary_summary(self, file_name: str, data: bytes) -> str:
        header = (
            "Binary file:\n"
            "\n"
            f"{file_name}\n"
            "\n"
            f"{len(data):,} bytes:\n"
            "\n"
        )
        return header + self.format(data)
