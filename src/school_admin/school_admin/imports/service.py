from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from ..classes.repository import ClassRepository
from ..core.enums import ImportKind
from ..core.exceptions import ImportRowError, ValidationError
from ..schedules.repository import ScheduleRepository
from ..subjects.repository import SubjectRepository
from ..users.repository import UserRepository
from .cache import ReferenceCache
from .importers import ClassRowImporter, RowImporter, ScheduleRowImporter, UserRowImporter
from .policy import ImportPolicy
from .resolver import ReferenceResolver
from .result import ImportOutcome, RowApplied, RowFailed, RowResult
from .rows import RawRow, decode_row
from .template import build_template

logger = logging.getLogger(__name__)


def apply_row(importer: RowImporter, raw: RawRow) -> RowResult:
    """Process one row and report the result instead of raising."""
    try:
        status = importer.apply(decode_row(raw))
    except ImportRowError as e:
        return RowFailed(raw=raw, error=e)
    except Exception as e:
        logger.exception("Unexpected error while importing row %r", raw)
        return RowFailed(raw=raw, error=e)
    return RowApplied(raw=raw, status=status)


class ImportService:
    """Use case: reconcile spreadsheet rows into one tenant's records.

    Rows run strictly in order against one ReferenceCache per job; a failing
    row is reported and the job moves on. Only failing to load the reference
    data aborts the job (ReferenceLoadError).
    """

    def __init__(
        self,
        classes: ClassRepository,
        subjects: SubjectRepository,
        users: UserRepository,
        schedules: ScheduleRepository,
        *,
        policies: Optional[Mapping[ImportKind, ImportPolicy]] = None,
    ):
        self._classes = classes
        self._subjects = subjects
        self._users = users
        self._schedules = schedules
        self._policies = dict(policies or {})

    def policy_for(self, kind: ImportKind) -> ImportPolicy:
        if kind in self._policies:
            return self._policies[kind]
        return ImportPolicy(create_subjects=kind == ImportKind.SCHEDULES)

    def _load_cache(self, tenant_id: int) -> ReferenceCache:
        return ReferenceCache.load(
            tenant_id=tenant_id,
            classes=self._classes,
            subjects=self._subjects,
            users=self._users,
        )

    def _importer_for(self, kind: ImportKind, *, tenant_id: int, cache: ReferenceCache) -> RowImporter:
        resolver = ReferenceResolver(cache, subjects=self._subjects, users=self._users, policy=self.policy_for(kind))
        if kind == ImportKind.SCHEDULES:
            return ScheduleRowImporter(resolver=resolver, schedules=self._schedules, tenant_id=tenant_id)
        if kind == ImportKind.CLASSES:
            return ClassRowImporter(cache=cache, classes=self._classes, tenant_id=tenant_id)
        return UserRowImporter(resolver=resolver, cache=cache, users=self._users, tenant_id=tenant_id)

    def run(self, kind: ImportKind, *, tenant_id: int, rows: Sequence[RawRow]) -> ImportOutcome:
        if not tenant_id:
            raise ValidationError("Tenant context missing")

        tenant_id = int(tenant_id)
        logger.info("Import %s for tenant %s: %d rows", kind.value, tenant_id, len(rows))

        cache = self._load_cache(tenant_id)
        importer = self._importer_for(kind, tenant_id=tenant_id, cache=cache)

        outcome = ImportOutcome()
        for index, raw in enumerate(rows, start=1):
            result = apply_row(importer, raw)
            if isinstance(result, RowFailed):
                logger.warning("Import %s row %d failed: %s", kind.value, index, result.message)
            outcome.record(result)

        logger.info(
            "Import %s for tenant %s done: imported=%d updated=%d skipped=%d failed=%d",
            kind.value,
            tenant_id,
            outcome.imported,
            outcome.updated,
            outcome.skipped,
            outcome.failed,
        )
        return outcome

    def import_schedules(self, *, tenant_id: int, rows: Sequence[RawRow]) -> ImportOutcome:
        return self.run(ImportKind.SCHEDULES, tenant_id=tenant_id, rows=rows)

    def import_classes(self, *, tenant_id: int, rows: Sequence[RawRow]) -> ImportOutcome:
        return self.run(ImportKind.CLASSES, tenant_id=tenant_id, rows=rows)

    def import_users(self, *, tenant_id: int, rows: Sequence[RawRow]) -> ImportOutcome:
        return self.run(ImportKind.USERS, tenant_id=tenant_id, rows=rows)

    def template(self, kind: ImportKind, *, tenant_id: int) -> bytes:
        """XLSX template pre-filled with the tenant's classes, subjects and teachers."""
        if not tenant_id:
            raise ValidationError("Tenant context missing")
        return build_template(kind, self._load_cache(int(tenant_id)))
