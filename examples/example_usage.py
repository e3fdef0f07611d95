"""Example: run a schedule import through the service layer (no Flask).

Usage: python -m examples.example_usage <tenant_id> <file.xlsx|file.csv>
"""

import importlib
import json
import sys
from pathlib import Path

from config import get_settings_module

from src.school_admin.school_admin.container import build_container
from src.school_admin.school_admin.imports.policy import policies_from_settings
from src.school_admin.school_admin.imports.spreadsheet import read_rows


def main():
    tenant_id, path = int(sys.argv[1]), Path(sys.argv[2])

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, policies=policies_from_settings(settings))

    rows = read_rows(path.name, path.read_bytes())
    outcome = container.import_service.import_schedules(tenant_id=tenant_id, rows=rows)
    print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False, default=str))


if __name__ == "__main__":
    main()
