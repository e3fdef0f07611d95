"""Downloadable import templates.

The first sheet holds the headers the importers accept; a hidden REFERENSI
sheet lists the tenant's days, classes, subjects and teachers, and the input
columns get dropdowns pointing at it.
"""
from __future__ import annotations

import io

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.datavalidation import DataValidation

from ..core.constants import DAY_NAMES_ID, TEMPLATE_INPUT_ROWS
from ..core.enums import ImportKind, Role
from .cache import ReferenceCache

TEMPLATE_SHEET = "TEMPLATE"
REFERENCE_SHEET = "REFERENSI"

HEADERS = {
    ImportKind.SCHEDULES: ["Hari", "JamMulai", "JamSelesai", "Kelas", "MataPelajaran", "Guru"],
    ImportKind.CLASSES: ["NamaKelas"],
    ImportKind.USERS: ["Nama", "Email", "Password", "Role", "Kelas", "MataPelajaran"],
}

EXAMPLES = {
    ImportKind.SCHEDULES: ["Senin", "07:00", "08:30", "X-1", "Matematika", "guru@sekolah.sch.id"],
    ImportKind.CLASSES: ["X-1"],
    ImportKind.USERS: ["Budi Santoso", "budi@sekolah.sch.id", "", "STUDENT", "X-1", ""],
}

_hdr_font = Font(bold=True, color="FFFFFF", size=11)
_hdr_fill = PatternFill("solid", fgColor="2E6DA4")
_ex_font = Font(italic=True, color="888888")
_center = Alignment(horizontal="center", vertical="center")
_thin = Side(style="thin", color="BBBBBB")
_border = Border(left=_thin, right=_thin, top=_thin, bottom=_thin)


def reference_lists(kind: ImportKind, cache: ReferenceCache) -> dict[str, list[str]]:
    """Column header -> allowed values for that input column."""
    classes = [c.name for c in cache.classes]
    subjects = [s.label for s in cache.subjects]
    teachers = [t.label for t in cache.teachers]

    if kind == ImportKind.SCHEDULES:
        return {"Hari": list(DAY_NAMES_ID), "Kelas": classes, "MataPelajaran": subjects, "Guru": teachers}
    if kind == ImportKind.USERS:
        return {"Role": [Role.TEACHER.value, Role.STUDENT.value], "Kelas": classes, "MataPelajaran": subjects}
    return {}


def _write_header(ws, headers: list[str]) -> None:
    for col, h in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col, value=h)
        cell.font = _hdr_font
        cell.fill = _hdr_fill
        cell.alignment = _center
        cell.border = _border
        ws.column_dimensions[get_column_letter(col)].width = max(14, len(h) + 4)
    ws.freeze_panes = "A2"


def build_template(kind: ImportKind, cache: ReferenceCache) -> bytes:
    headers = HEADERS[kind]
    wb = openpyxl.Workbook()

    ws = wb.active
    ws.title = TEMPLATE_SHEET
    _write_header(ws, headers)
    for col, value in enumerate(EXAMPLES[kind], 1):
        ws.cell(row=2, column=col, value=value or None).font = _ex_font

    lists = reference_lists(kind, cache)
    if lists:
        ref = wb.create_sheet(REFERENCE_SHEET)
        ref.sheet_state = "hidden"
        last_row = TEMPLATE_INPUT_ROWS + 1

        for ref_col, (header, values) in enumerate(lists.items(), 1):
            ref.cell(row=1, column=ref_col, value=header)
            for r, value in enumerate(values, 2):
                ref.cell(row=r, column=ref_col, value=value)

            # Excel rejects a list validation over an empty range.
            if not values:
                continue

            letter = get_column_letter(ref_col)
            target = get_column_letter(headers.index(header) + 1)
            dv = DataValidation(
                type="list",
                formula1=f"{REFERENCE_SHEET}!${letter}$2:${letter}${len(values) + 1}",
                allow_blank=True,
            )
            dv.sqref = f"{target}2:{target}{last_row}"
            ws.add_data_validation(dv)

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()
