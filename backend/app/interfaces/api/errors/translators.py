"""Translate foreign errors into the application error taxonomy.

Every translator returns the very same exception object when it does not
recognise it, so translators can be chained in any order.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from fastapi.exceptions import RequestValidationError
from jose import ExpiredSignatureError, JWTError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.application.errors import (
    ApplicationError,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
    error_for_status,
)
from app.infrastructure.db.errors import (
    FOREIGN_KEY_VIOLATION,
    NULL_CONSTRAINT_VIOLATION,
    RECORD_MISSING,
    RECORD_NOT_FOUND,
    REQUIRED_RELATION_VIOLATION,
    UNIQUE_VIOLATION,
    VALUE_TOO_LONG,
    describe_database_error,
)

Translator = Callable[[Exception], Exception]

INVALID_JSON_MESSAGE = "JSON inválido en el cuerpo de la petición"
DATABASE_ERROR_MESSAGE = "Error al procesar la solicitud"


def _first_target(meta: Any, default: str = "campo") -> str:
    target = meta.get("target") if isinstance(meta, dict) else None
    if isinstance(target, str):
        return target
    if target:
        return str(target[0])
    return default


PERSISTENCE_ERRORS: dict[str, Callable[[Any], ApplicationError]] = {
    UNIQUE_VIOLATION: lambda meta: ConflictError(f"El {_first_target(meta)} ya está registrado"),
    RECORD_NOT_FOUND: lambda meta: NotFoundError("El registro solicitado no fue encontrado"),
    RECORD_MISSING: lambda meta: NotFoundError("El registro no existe"),
    FOREIGN_KEY_VIOLATION: lambda meta: ValidationError("Operación inválida: referencia a registro inexistente"),
    REQUIRED_RELATION_VIOLATION: lambda meta: ValidationError("La operación viola una relación requerida"),
    VALUE_TOO_LONG: lambda meta: ValidationError("El valor proporcionado es demasiado largo para el campo"),
    NULL_CONSTRAINT_VIOLATION: lambda meta: ValidationError(f"El campo {_first_target(meta)} es requerido"),
}


def _is_persistence_code(code: Any) -> bool:
    return isinstance(code, str) and code.startswith("P") and code[1:].isdigit()


def make_persistence_translator(debug: bool = False) -> Translator:
    """Translator for errors raised by the persistence layer.

    Recognises foreign errors exposing a `code` of the P-family (with an
    optional `meta["target"]`) and SQLAlchemy exceptions.
    """

    def translate_persistence_error(exc: Exception) -> Exception:
        code = getattr(exc, "code", None)
        if _is_persistence_code(code):
            meta = getattr(exc, "meta", None)
            message = str(exc)
        else:
            failure = describe_database_error(exc)
            if failure is None:
                return exc
            code, meta, message = failure.code, failure.meta, failure.message

        build = PERSISTENCE_ERRORS.get(code)
        if build is not None:
            error = build(meta)
        elif debug:
            error = ApplicationError(f"Error de base de datos [{code}]: {message}")
        else:
            error = ApplicationError(DATABASE_ERROR_MESSAGE)
        error.__cause__ = exc
        return error

    return translate_persistence_error


def translate_token_error(exc: Exception) -> Exception:
    if isinstance(exc, ExpiredSignatureError):
        error = UnauthorizedError("Token expirado")
    elif isinstance(exc, JWTError):
        error = UnauthorizedError("Token inválido")
    else:
        return exc
    error.__cause__ = exc
    return error


def _field_name(location: Sequence[Any]) -> str:
    parts = [str(part) for part in location if part not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or "body"


def _describe_validation_issue(issue: dict[str, Any]) -> str:
    field = _field_name(issue.get("loc", ()))
    if issue.get("type") == "missing":
        return f"El campo '{field}' es requerido"
    return f"El campo '{field}' no es válido: {issue.get('msg', '')}"


def translate_request_error(exc: Exception) -> Exception:
    if isinstance(exc, RequestValidationError):
        issues = list(exc.errors())
        if any(issue.get("type") == "json_invalid" for issue in issues):
            error: ApplicationError = ValidationError(INVALID_JSON_MESSAGE)
        else:
            error = ValidationError("Errores de validación", [_describe_validation_issue(issue) for issue in issues])
    elif isinstance(exc, StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        error = error_for_status(exc.status_code, detail, headers=getattr(exc, "headers", None))
    else:
        return exc
    error.__cause__ = exc
    return error


def build_translators(debug: bool = False) -> list[Translator]:
    return [translate_request_error, translate_token_error, make_persistence_translator(debug=debug)]


def translate(exc: Exception, translators: Iterable[Translator]) -> Exception:
    for translator in translators:
        exc = translator(exc)
    return exc
