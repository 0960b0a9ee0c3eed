"""ASGI supervisor that routes every escaping failure into the error pipeline."""

from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.interfaces.api.errors.responder import ErrorPipeline


class ResponseGuard:
    """Wraps `send` and records whether a response has started for the request."""

    def __init__(self, send: Send) -> None:
        self._send = send
        self.started = False
        self.completed = False

    async def send(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self.started = True
        elif message["type"] == "http.response.body" and not message.get("more_body", False):
            self.completed = True
        await self._send(message)


async def respond_once(
    pipeline: ErrorPipeline,
    scope: Scope,
    receive: Receive,
    guard: ResponseGuard,
    exc: Exception,
) -> None:
    """Write the error response unless the request already owns one.

    A started response belongs to whoever wrote first, so the failure goes
    back to the server's default handling instead.
    """
    if guard.started:
        raise exc
    response = pipeline.respond(Request(scope, receive), exc)
    await response(scope, receive, guard.send)


class ErrorBoundaryMiddleware:
    def __init__(self, app: ASGIApp, pipeline: ErrorPipeline) -> None:
        self.app = app
        self.pipeline = pipeline

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        guard = ResponseGuard(send)
        try:
            await self.app(scope, receive, guard.send)
        except Exception as exc:
            await respond_once(self.pipeline, scope, receive, guard, exc)
