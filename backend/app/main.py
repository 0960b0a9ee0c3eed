from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings
from app.infrastructure.db.session import Database
from app.infrastructure.logging import configure_logging, get_logger
from app.interfaces.api.errors.handlers import register_error_handlers
from app.interfaces.api.errors.responder import ErrorPipeline
from app.interfaces.api.middleware.request_logging import RequestLoggingMiddleware
from app.interfaces.api.v1.router import api_router

logger = get_logger(__name__)

OPENAPI_DESCRIPTION = """
Clinic API for user accounts and authentication.

How to call this API:
- Authenticate at `POST /api/v1/auth/login`.
- Use `Authorization: Bearer <access_token>` in protected endpoints.

Every error is returned as
`{"status": "error", "statusCode", "message", "timestamp", "path", "method"}`.
With `APP_ENV=development` the body also carries `stack`, `error` and `validationErrors`.
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Service health and connectivity checks."},
    {"name": "auth", "description": "Authentication and token issuance."},
    {"name": "users", "description": "User registration, profile reads, updates and removal."},
]


def create_app(app_settings: Settings = settings, database: Database | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(app_settings)
        logger.info(
            "app_startup",
            app_name=app_settings.app_name,
            version=app_settings.app_version,
            env=app_settings.app_env,
        )
        yield
        app.state.database.dispose()
        logger.info("app_shutdown", app_name=app_settings.app_name)

    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description=OPENAPI_DESCRIPTION,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = database if database is not None else Database(app_settings.database_url)

    register_error_handlers(app, ErrorPipeline(debug=app_settings.debug))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[app_settings.frontend_url, "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/")
    def root():
        return {"message": f"{app_settings.app_name} is running"}

    app.include_router(api_router)
    return app


app = create_app()
