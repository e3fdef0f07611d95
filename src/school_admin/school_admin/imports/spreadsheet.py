"""Uploaded file -> list of raw rows (header -> cell value)."""
from __future__ import annotations

import io
import logging
import math
from datetime import date, datetime, time
from typing import Any

import numpy as np
import pandas as pd

from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

CSV_EXTENSIONS = {"csv", "txt"}
EXCEL_EXTENSIONS = {"xlsx", "xlsm"}


def _extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in (filename or "") else ""


def _decode_text(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _plain(value: Any) -> Any:
    """JSON-safe cell value: NaN/NaT -> None, time -> 'HH:MM', numpy -> Python."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    return value


def _is_blank(row: dict[str, Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in row.values())


def _frame_to_rows(frame: pd.DataFrame) -> list[dict[str, Any]]:
    frame = frame.loc[:, [not str(c).startswith("Unnamed:") for c in frame.columns]]
    rows = []
    for record in frame.to_dict(orient="records"):
        row = {str(k).strip(): _plain(v) for k, v in record.items()}
        if not _is_blank(row):
            rows.append(row)
    return rows


def read_rows(filename: str, data: bytes) -> list[dict[str, Any]]:
    """Read the first sheet (or the CSV body) of an upload.

    CSV files are read with the comma separator; a semicolon file arrives as
    one combined column and is split again per row by rows.repair_delimited.
    """
    ext = _extension(filename)
    if not data:
        raise ValidationError("The uploaded file is empty")

    try:
        if ext in CSV_EXTENSIONS:
            frame = pd.read_csv(io.StringIO(_decode_text(data)), dtype=str, keep_default_na=False)
        elif ext in EXCEL_EXTENSIONS:
            frame = pd.read_excel(io.BytesIO(data), engine="openpyxl", dtype=object)
        else:
            raise ValidationError(f"Unsupported file type '.{ext}' (use .xlsx or .csv)")
    except ValidationError:
        raise
    except Exception as e:
        logger.warning("Could not read upload %s: %s", filename, e)
        raise ValidationError(f"Could not read '{filename}': {e}") from e

    rows = _frame_to_rows(frame)
    logger.debug("Read %d rows from %s", len(rows), filename)
    return rows
