from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .classes.mysql_class_repository import MySQLClassRepository
from .core.enums import ImportKind
from .database.bootstrap import as_db_config
from .database.connection import DatabaseConnection
from .imports.policy import ImportPolicy
from .imports.service import ImportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .users.mysql_user_repository import MySQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    classes_repo: object
    subjects_repo: object
    users_repo: object
    schedules_repo: object

    import_service: ImportService
    schedule_service: ScheduleService


def build_services(
    *,
    classes_repo,
    subjects_repo,
    users_repo,
    schedules_repo,
    policies: Optional[Mapping[ImportKind, ImportPolicy]] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repositories (MySQL in production, fakes in tests)."""
    import_service = ImportService(classes_repo, subjects_repo, users_repo, schedules_repo, policies=policies)
    schedule_service = ScheduleService(schedules_repo)

    return Container(
        conn=conn,
        classes_repo=classes_repo,
        subjects_repo=subjects_repo,
        users_repo=users_repo,
        schedules_repo=schedules_repo,
        import_service=import_service,
        schedule_service=schedule_service,
    )


def build_container(*, db_config: dict, policies: Optional[Mapping[ImportKind, ImportPolicy]] = None) -> Container:
    conn = DatabaseConnection.get_instance(as_db_config(db_config))

    return build_services(
        classes_repo=MySQLClassRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        users_repo=MySQLUserRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        policies=policies,
        conn=conn,
    )
