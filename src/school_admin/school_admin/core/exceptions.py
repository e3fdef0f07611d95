class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ReferenceLoadError(DomainError):
    """Raised when an import job cannot load its reference data at all."""


class ImportRowError(DomainError):
    """Base exception for a single import row that cannot be applied.

    Row errors never abort a batch; the import service records them next to
    the offending row and moves on.
    """


class MissingField(ImportRowError):
    """A mandatory column has no value under any accepted header."""


class InvalidField(ImportRowError):
    """A value is present but unusable (malformed email, email owned by another school)."""


class UnknownClass(ImportRowError):
    """The class name does not match any class of the tenant."""


class UnknownSubject(ImportRowError):
    """The subject token matches nothing and may not be auto-created."""


class UnknownTeacher(ImportRowError):
    """No teacher matches the explicit token, or none teaches the subject."""


class AmbiguousTeacher(ImportRowError):
    """More than one teacher teaches the subject and none was named."""


class InvalidDay(ImportRowError):
    """The day token is outside the accepted vocabulary."""


class InvalidTimeFormat(ImportRowError):
    """The time is not H:MM / HH:MM."""


class PersistenceFailure(ImportRowError):
    """The storage layer rejected a write for this row."""
