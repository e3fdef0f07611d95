from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.web import admin_required, current_tenant_id, json_error, optional_int
from ..container import Container
from ..core.constants import XLSX_MIMETYPE
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules/export", methods=["GET"], endpoint="api_schedules_export")
    @admin_required
    def api_schedules_export():
        tenant_id = current_tenant_id()
        if not tenant_id:
            return json_error("Tenant context missing", 400)

        try:
            class_id = optional_int(request.args.get("classId"))
            day_of_week = optional_int(request.args.get("dayOfWeek"))
            data = container.schedule_service.export_xlsx(
                tenant_id=tenant_id, class_id=class_id, day_of_week=day_of_week
            )
        except ValueError:
            return json_error("classId and dayOfWeek must be numbers", 400)
        except ValidationError as e:
            return json_error(str(e), 400)

        return send_file(
            io.BytesIO(data),
            download_name="jadwal.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )
