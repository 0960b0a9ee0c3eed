from fastapi import APIRouter

from app.interfaces.api.v1.routes.auth import router as auth_router
from app.interfaces.api.v1.routes.ping import router as ping_router
from app.interfaces.api.v1.routes.users import router as users_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router)
api_router.include_router(ping_router)
api_router.include_router(users_router)
