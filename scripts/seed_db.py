from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_admin.school_admin.database.bootstrap import as_db_config, ensure_demo_tenant


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a demo school with one admin account.")
    parser.add_argument("--school", default="Demo School")
    parser.add_argument("--admin-email", default="admin@demo.sch.id")
    parser.add_argument("--admin-password", default="admin123")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    tenant_id = ensure_demo_tenant(
        db_config,
        school_name=args.school,
        admin_email=args.admin_email,
        admin_password=args.admin_password,
    )
    print(f"OK: Seeded database -> {as_db_config(db_config).describe()} (tenant_id={tenant_id}, admin={args.admin_email})")


if __name__ == "__main__":
    main()
