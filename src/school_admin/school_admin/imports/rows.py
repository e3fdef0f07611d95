from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from typing import Any, Mapping, Optional, Sequence

from ..core.exceptions import MissingField

RawRow = Mapping[str, Any]


def header_key(header: str) -> str:
    """'Jam Mulai' / 'jam_mulai' / 'JamMulai' -> 'jammulai'."""
    return re.sub(r"[\s_]+", "", str(header)).lower()


def cell_text(value: Any) -> str:
    """Render a loosely typed cell as trimmed text ('' for blanks)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value).strip()


def repair_delimited(row: RawRow) -> dict[str, Any]:
    """Undo a CSV file that was read as a single spreadsheet column.

    {"A;B;C": "1;2;3"} -> {"A": "1", "B": "2", "C": "3"}. Any other row is
    returned unchanged (as a new dict).
    """
    keys = list(row.keys())
    if len(keys) != 1:
        return dict(row)

    header = str(keys[0])
    if "," not in header and ";" not in header:
        return dict(row)

    delimiter = "," if "," in header else ";"
    headers = header.split(delimiter)
    values = cell_text(row[keys[0]]).split(delimiter)

    repaired: dict[str, Any] = {}
    for i, h in enumerate(headers):
        repaired[h.strip()] = values[i].strip() if i < len(values) else ""
    return repaired


class ImportRow:
    """A decoded row: header -> text, with alias-aware lookups."""

    def __init__(self, values: Mapping[str, str]):
        self._values = dict(values)
        self._by_key: dict[str, str] = {}
        for header, value in self._values.items():
            key = header_key(header)
            # First non-empty value wins among headers that collapse to one key.
            if not self._by_key.get(key):
                self._by_key[key] = value

    @property
    def values(self) -> Mapping[str, str]:
        return self._values

    def get(self, aliases: Sequence[str]) -> str:
        for alias in aliases:
            value = self._by_key.get(header_key(alias), "")
            if value:
                return value
        return ""

    def require(self, aliases: Sequence[str], label: Optional[str] = None) -> str:
        value = self.get(aliases)
        if not value:
            raise MissingField(f"{label or aliases[0]} is required (accepted columns: {', '.join(aliases)})")
        return value

    def __repr__(self) -> str:
        return f"ImportRow({self._values!r})"


def decode_row(raw: RawRow) -> ImportRow:
    """Normalize one raw spreadsheet row. Never raises for odd content."""
    repaired = repair_delimited(raw)
    return ImportRow({str(k).strip(): cell_text(v) for k, v in repaired.items() if k is not None})
