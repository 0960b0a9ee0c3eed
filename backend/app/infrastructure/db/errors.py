"""Describe SQLAlchemy failures with short persistence error codes.

The codes follow the `P2xxx` family used across the API for persistence
failures: P2000 value too long, P2001 missing record in a where condition,
P2002 unique violation, P2003 foreign key violation, P2011 null constraint
violation, P2014 required relation violation, P2025 record not found.
"""

import re
from dataclasses import dataclass, field

from sqlalchemy.exc import DataError, IntegrityError, NoResultFound, SQLAlchemyError

UNIQUE_VIOLATION = "P2002"
RECORD_NOT_FOUND = "P2025"
RECORD_MISSING = "P2001"
FOREIGN_KEY_VIOLATION = "P2003"
REQUIRED_RELATION_VIOLATION = "P2014"
VALUE_TOO_LONG = "P2000"
NULL_CONSTRAINT_VIOLATION = "P2011"
UNKNOWN_DATABASE_ERROR = "P1000"

_PG_CODES = {
    "23505": UNIQUE_VIOLATION,
    "23502": NULL_CONSTRAINT_VIOLATION,
    "22001": VALUE_TOO_LONG,
}
_SQLITE_COLUMNS = re.compile(r"constraint failed: (?P<columns>[\w., ]+)")
_PG_KEY_COLUMNS = re.compile(r"Key \((?P<columns>[^)]+)\)")
_PG_NULL_COLUMN = re.compile(r'null value in column "(?P<column>\w+)"')


@dataclass(frozen=True)
class PersistenceFailure:
    code: str
    message: str
    target: list[str] = field(default_factory=list)

    @property
    def meta(self) -> dict[str, list[str]]:
        return {"target": list(self.target)}


def _sqlite_columns(message: str) -> list[str]:
    match = _SQLITE_COLUMNS.search(message)
    if match is None:
        return []
    return [column.strip().split(".")[-1] for column in match.group("columns").split(",")]


def _pg_columns(message: str) -> list[str]:
    match = _PG_KEY_COLUMNS.search(message)
    if match is not None:
        return [column.strip() for column in match.group("columns").split(",")]
    match = _PG_NULL_COLUMN.search(message)
    if match is not None:
        return [match.group("column")]
    return []


def _describe_pg(pgcode: str, message: str) -> PersistenceFailure:
    if pgcode == "23503":
        code = REQUIRED_RELATION_VIOLATION if "is still referenced" in message else FOREIGN_KEY_VIOLATION
        return PersistenceFailure(code=code, message=message, target=_pg_columns(message))
    return PersistenceFailure(
        code=_PG_CODES.get(pgcode, UNKNOWN_DATABASE_ERROR), message=message, target=_pg_columns(message)
    )


def _describe_sqlite(message: str) -> PersistenceFailure:
    if message.startswith("UNIQUE constraint failed"):
        code = UNIQUE_VIOLATION
    elif message.startswith("NOT NULL constraint failed"):
        code = NULL_CONSTRAINT_VIOLATION
    elif message.startswith("FOREIGN KEY constraint failed"):
        code = FOREIGN_KEY_VIOLATION
    else:
        code = UNKNOWN_DATABASE_ERROR
    return PersistenceFailure(code=code, message=message, target=_sqlite_columns(message))


def describe_database_error(exc: BaseException) -> PersistenceFailure | None:
    """Return the persistence failure behind `exc`, or None for non-database errors."""
    if isinstance(exc, NoResultFound):
        return PersistenceFailure(code=RECORD_NOT_FOUND, message=str(exc))
    if not isinstance(exc, SQLAlchemyError):
        return None

    orig = getattr(exc, "orig", None)
    message = str(orig) if orig is not None else str(exc)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode:
        return _describe_pg(pgcode, message)
    if isinstance(exc, IntegrityError):
        return _describe_sqlite(message)
    if isinstance(exc, DataError) and "too long" in message:
        return PersistenceFailure(code=VALUE_TOO_LONG, message=message)
    return PersistenceFailure(code=UNKNOWN_DATABASE_ERROR, message=message)
