from __future__ import annotations

import io
import logging

from flask import Flask, jsonify, request, send_file

from ..common.web import admin_required, current_tenant_id, json_error
from ..container import Container
from ..core.constants import XLSX_MIMETYPE
from ..core.enums import ImportKind
from ..core.exceptions import ReferenceLoadError, ValidationError
from .spreadsheet import read_rows

logger = logging.getLogger(__name__)


def _parse_kind(value: str) -> ImportKind:
    try:
        return ImportKind((value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown import type '{value}' (use schedules, classes or users)")


def _request_rows() -> list[dict]:
    upload = request.files.get("file")
    if upload is not None and upload.filename:
        return read_rows(upload.filename, upload.read())

    body = request.get_json(silent=True)
    rows = body.get("rows") if isinstance(body, dict) else None
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise ValidationError("Upload a file or send a JSON body with a 'rows' list")
    return rows


def register(app: Flask, container: Container) -> None:
    @app.route("/api/imports/<kind>", methods=["POST"], endpoint="api_import")
    @admin_required
    def api_import(kind: str):
        try:
            import_kind = _parse_kind(kind)
        except ValidationError as e:
            return json_error(str(e), 404)

        tenant_id = current_tenant_id()
        if not tenant_id:
            return json_error("Tenant context missing", 400)

        try:
            rows = _request_rows()
            outcome = container.import_service.run(import_kind, tenant_id=tenant_id, rows=rows)
        except ValidationError as e:
            return json_error(str(e), 400)
        except ReferenceLoadError as e:
            return json_error(str(e), 503)

        return jsonify(outcome.to_dict())

    @app.route("/api/imports/template", methods=["GET"], endpoint="api_import_template")
    @admin_required
    def api_import_template():
        try:
            import_kind = _parse_kind(request.args.get("type") or ImportKind.SCHEDULES.value)
        except ValidationError as e:
            return json_error(str(e), 400)

        tenant_id = current_tenant_id()
        if not tenant_id:
            return json_error("Tenant context missing", 400)

        try:
            data = container.import_service.template(import_kind, tenant_id=tenant_id)
        except ReferenceLoadError as e:
            return json_error(str(e), 503)

        return send_file(
            io.BytesIO(data),
            download_name=f"template_{import_kind.value}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )
