from __future__ import annotations

import io
import logging
from typing import Optional

import pandas as pd

from ..core.exceptions import ValidationError
from ..imports.daytime import day_name
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Hari", "JamMulai", "JamSelesai", "Kelas", "MataPelajaran", "Guru", "EmailGuru"]
EXPORT_SHEET = "Jadwal"


class ScheduleService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def export_rows(
        self, *, tenant_id: int, class_id: Optional[int] = None, day_of_week: Optional[int] = None
    ) -> list[dict]:
        if not tenant_id:
            raise ValidationError("Tenant context missing")
        if day_of_week is not None and not 0 <= int(day_of_week) <= 6:
            raise ValidationError("dayOfWeek must be between 0 and 6")

        rows = self._schedules.list_for_export(tenant_id=int(tenant_id), class_id=class_id, day_of_week=day_of_week)
        return [
            {
                "Hari": day_name(r.day_of_week),
                "JamMulai": r.start_time,
                "JamSelesai": r.end_time,
                "Kelas": r.class_name,
                "MataPelajaran": r.subject,
                "Guru": r.teacher_name,
                "EmailGuru": r.teacher_email,
            }
            for r in rows
        ]

    def export_xlsx(
        self, *, tenant_id: int, class_id: Optional[int] = None, day_of_week: Optional[int] = None
    ) -> bytes:
        """Schedules in the import column layout, so the file can be edited and re-imported."""
        rows = self.export_rows(tenant_id=tenant_id, class_id=class_id, day_of_week=day_of_week)
        df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=EXPORT_SHEET)

        logger.info("Exported %d schedules for tenant %s", len(rows), tenant_id)
        return output.getvalue()
