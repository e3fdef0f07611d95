from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..core.constants import DEFAULT_IMPORT_PASSWORD
from ..core.enums import ImportKind


@dataclass(frozen=True)
class ImportPolicy:
    """What an import job may create on its own besides its main records."""

    create_subjects: bool = False
    create_teachers: bool = False
    default_password: str = DEFAULT_IMPORT_PASSWORD


def policies_from_settings(settings: Any) -> Mapping[ImportKind, ImportPolicy]:
    """Build one policy per import kind from a settings module."""
    default_password = str(getattr(settings, "DEFAULT_IMPORT_PASSWORD", DEFAULT_IMPORT_PASSWORD))
    return {
        ImportKind.SCHEDULES: ImportPolicy(
            create_subjects=bool(getattr(settings, "SCHEDULE_IMPORT_CREATE_SUBJECTS", True)),
            create_teachers=bool(getattr(settings, "SCHEDULE_IMPORT_CREATE_TEACHERS", False)),
            default_password=default_password,
        ),
        ImportKind.CLASSES: ImportPolicy(default_password=default_password),
        ImportKind.USERS: ImportPolicy(
            create_subjects=bool(getattr(settings, "USER_IMPORT_CREATE_SUBJECTS", False)),
            default_password=default_password,
        ),
    }
