"""Terminal stage of the error pipeline: classify, log and respond once."""

import json
import traceback
from collections.abc import Sequence

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.types import Scope

from app.application.errors import GENERIC_ERROR_MESSAGE, ApplicationError, NotFoundError, ValidationError
from app.infrastructure.logging import get_logger
from app.interfaces.api.errors.translators import INVALID_JSON_MESSAGE, Translator, build_translators, translate

logger = get_logger(__name__)

MALFORMED_UUID_PREFIX = "badly formed hexadecimal UUID string"


def normalize_foreign_error(exc: Exception) -> ApplicationError:
    """Last-resort classification for errors no translator claimed."""
    if isinstance(exc, ApplicationError):
        return exc
    if isinstance(exc, json.JSONDecodeError):
        error: ApplicationError = ValidationError(INVALID_JSON_MESSAGE)
    elif isinstance(exc, ValueError) and str(exc).startswith(MALFORMED_UUID_PREFIX):
        error = ValidationError("ID inválido proporcionado")
    elif isinstance(exc, FileNotFoundError):
        error = NotFoundError("Archivo o recurso no encontrado")
    else:
        return ApplicationError.unexpected(exc)
    error.__cause__ = exc
    return error


def request_target(scope: Scope) -> str:
    """Request path followed by its query string, as the client sent it."""
    query = scope.get("query_string", b"").decode("latin-1")
    return f"{scope['path']}?{query}" if query else scope["path"]


def _origin(error: ApplicationError) -> BaseException:
    cause = error.__cause__
    return cause if cause is not None else error


def _format_stack(error: ApplicationError) -> str:
    origin = _origin(error)
    return "".join(traceback.format_exception(type(origin), origin, origin.__traceback__))


class ErrorResponder:
    def __init__(self, debug: bool = False) -> None:
        self.debug = debug

    def resolve_message(self, error: ApplicationError) -> str:
        if not error.message:
            return GENERIC_ERROR_MESSAGE
        if not error.is_operational and not self.debug:
            return GENERIC_ERROR_MESSAGE
        return error.message

    def log(self, request: Request, error: ApplicationError, status_code: int, message: str) -> None:
        client = request.client.host if request.client is not None else "unknown"
        target = request_target(request.scope)
        log_method = logger.error if status_code >= 500 else logger.warning
        log_method(
            "request_error",
            status_code=status_code,
            method=request.method,
            path=target,
            client=client,
            message=error.message or message,
            error_kind=error.kind.value,
            error_type=type(_origin(error)).__name__,
            is_operational=error.is_operational,
            exc_info=_origin(error) if self.debug and status_code >= 500 else None,
        )
        for position, detail in enumerate(error.errors, start=1):
            logger.warning("validation_error_detail", position=position, detail=detail, path=target)

    def build_body(self, request: Request, error: ApplicationError, status_code: int, message: str) -> dict:
        body: dict = {
            "status": "error",
            "statusCode": status_code,
            "message": message,
            "timestamp": error.timestamp.isoformat(),
            "path": request_target(request.scope),
            "method": request.method,
        }
        if self.debug:
            body["stack"] = _format_stack(error)
            body["error"] = {"name": error.kind.value, "isOperational": error.is_operational}
            if error.errors:
                body["validationErrors"] = error.errors
        return body

    def respond(self, request: Request, exc: Exception) -> JSONResponse:
        error = normalize_foreign_error(exc)
        status_code = error.status_code or 500
        message = self.resolve_message(error)
        self.log(request, error, status_code, message)
        return JSONResponse(
            status_code=status_code,
            content=self.build_body(request, error, status_code, message),
            headers=error.headers,
        )


class ErrorPipeline:
    """Translators followed by the responder, shared by every failure path."""

    def __init__(self, debug: bool = False, translators: Sequence[Translator] | None = None) -> None:
        self.debug = debug
        self.translators = list(translators) if translators is not None else build_translators(debug=debug)
        self.responder = ErrorResponder(debug=debug)

    def classify(self, exc: Exception) -> ApplicationError:
        return normalize_foreign_error(translate(exc, self.translators))

    def respond(self, request: Request, exc: Exception) -> JSONResponse:
        return self.responder.respond(request, self.classify(exc))
