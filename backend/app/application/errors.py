from datetime import datetime, timezone
from enum import Enum
from typing import final


class ErrorKind(str, Enum):
    validation = "ValidationError"
    unauthorized = "UnauthorizedError"
    forbidden = "ForbiddenError"
    not_found = "NotFoundError"
    conflict = "ConflictError"
    generic = "ApplicationError"


CANONICAL_STATUS: dict[ErrorKind, int] = {
    ErrorKind.validation: 400,
    ErrorKind.unauthorized: 401,
    ErrorKind.forbidden: 403,
    ErrorKind.not_found: 404,
    ErrorKind.conflict: 409,
    ErrorKind.generic: 500,
}

GENERIC_ERROR_MESSAGE = "Ocurrió un error inesperado en el servidor"


class ApplicationError(Exception):
    """Base application-layer error, independent from transport concerns.

    Used directly it is the Generic kind: status 500 unless overridden.
    The named kinds below are final; the responder matches on `kind`.
    """

    kind: ErrorKind = ErrorKind.generic

    def __init__(
        self,
        message: str = GENERIC_ERROR_MESSAGE,
        status_code: int | None = None,
        is_operational: bool = True,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else CANONICAL_STATUS[self.kind]
        self.is_operational = is_operational
        self.headers = headers
        self._timestamp = datetime.now(timezone.utc)

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def errors(self) -> list[str]:
        return []

    @classmethod
    def unexpected(cls, exc: BaseException) -> "ApplicationError":
        """Wrap an unclassified failure as a non-operational Generic error."""
        error = ApplicationError(str(exc) or GENERIC_ERROR_MESSAGE, is_operational=False)
        error.__cause__ = exc
        return error


@final
class ValidationError(ApplicationError):
    """Raised when application-level validation fails."""

    kind = ErrorKind.validation

    def __init__(self, message: str = "Errores de validación", errors: list[str] | None = None) -> None:
        super().__init__(message)
        self._errors = list(errors or [])

    @property
    def errors(self) -> list[str]:
        return list(self._errors)


@final
class UnauthorizedError(ApplicationError):
    """Raised when the caller is not authenticated."""

    kind = ErrorKind.unauthorized

    def __init__(self, message: str = "No autorizado", headers: dict[str, str] | None = None) -> None:
        super().__init__(message, headers=headers)


@final
class ForbiddenError(ApplicationError):
    """Raised when operation is forbidden by business rules."""

    kind = ErrorKind.forbidden

    def __init__(self, message: str = "Acceso prohibido") -> None:
        super().__init__(message)


@final
class NotFoundError(ApplicationError):
    """Raised when an expected entity does not exist."""

    kind = ErrorKind.not_found

    def __init__(self, message: str = "Recurso no encontrado") -> None:
        super().__init__(message)


@final
class ConflictError(ApplicationError):
    """Raised when a uniqueness or state conflict occurs."""

    kind = ErrorKind.conflict

    def __init__(self, message: str = "Conflicto con el estado actual del recurso") -> None:
        super().__init__(message)


ERROR_TYPES: dict[ErrorKind, type[ApplicationError]] = {
    ErrorKind.validation: ValidationError,
    ErrorKind.unauthorized: UnauthorizedError,
    ErrorKind.forbidden: ForbiddenError,
    ErrorKind.not_found: NotFoundError,
    ErrorKind.conflict: ConflictError,
    ErrorKind.generic: ApplicationError,
}


def error_for_status(status_code: int, message: str, headers: dict[str, str] | None = None) -> ApplicationError:
    """Build the taxonomy error whose canonical status matches `status_code`."""
    for kind, canonical in CANONICAL_STATUS.items():
        if kind is ErrorKind.generic or canonical != status_code:
            continue
        if kind is ErrorKind.unauthorized:
            return UnauthorizedError(message, headers=headers)
        error = ERROR_TYPES[kind](message)
        error.headers = headers
        return error
    return ApplicationError(message, status_code=status_code, headers=headers)
