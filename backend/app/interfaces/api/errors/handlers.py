"""Wire the error pipeline into a FastAPI application."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import Receive, Scope, Send

from app.application.errors import ApplicationError, NotFoundError
from app.interfaces.api.errors.responder import ErrorPipeline, request_target
from app.interfaces.api.middleware.error_boundary import ErrorBoundaryMiddleware


async def route_not_found(scope: Scope, receive: Receive, send: Send) -> None:
    """Router fallback for unmatched requests; the pipeline writes the 404."""
    raise NotFoundError(f"Ruta no encontrada: {scope.get('method', 'GET')} {request_target(scope)}")


def register_error_handlers(app: FastAPI, pipeline: ErrorPipeline) -> None:
    """Send every failure of `app` through `pipeline`.

    Errors FastAPI already catches (application errors, HTTP exceptions,
    request validation) reach the pipeline through exception handlers;
    anything else escapes to the boundary middleware.
    """

    async def handle_error(request: Request, exc: Exception) -> JSONResponse:
        return pipeline.respond(request, exc)

    app.add_exception_handler(ApplicationError, handle_error)
    app.add_exception_handler(StarletteHTTPException, handle_error)
    app.add_exception_handler(RequestValidationError, handle_error)
    app.add_middleware(ErrorBoundaryMiddleware, pipeline=pipeline)
    app.router.default = route_not_found
