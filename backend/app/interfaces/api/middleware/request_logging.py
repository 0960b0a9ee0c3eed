import time

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.infrastructure.logging import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        client = scope.get("client")
        request_fields = {
            "method": scope["method"],
            "path": scope["path"],
            "client": client[0] if client else "unknown",
        }
        logger.info("request_started", **request_fields)
        started_at = time.perf_counter()
        status_holder: dict[str, int] = {}

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                status_holder["status_code"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            logger.info(
                "request_completed",
                status_code=status_holder.get("status_code", 500),
                duration_ms=round((time.perf_counter() - started_at) * 1000, 2),
                **request_fields,
            )
