from collections.abc import Callable

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.application.errors import ForbiddenError, UnauthorizedError
from app.application.services.security_service import read_access_token
from app.domain.roles import UserRole
from app.infrastructure.db.models import User
from app.infrastructure.db.session import get_db

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


def get_current_user(token: str | None = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    if token is None:
        raise UnauthorizedError("Token de autenticación requerido", headers={"WWW-Authenticate": "Bearer"})
    user = db.get(User, read_access_token(token))
    if user is None:
        raise UnauthorizedError("Usuario no encontrado o inactivo")
    return user


def require_authenticated(current_user: User = Depends(get_current_user)) -> User:
    return current_user


def require_roles(allowed_roles: list[UserRole]) -> Callable:
    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in {role.value for role in allowed_roles}:
            raise ForbiddenError("Permisos insuficientes")
        return current_user

    return checker


def require_self_or_roles(user_id_param: str, allowed_roles: list[UserRole]) -> Callable:
    def checker(request: Request, current_user: User = Depends(get_current_user)) -> User:
        if current_user.role in {role.value for role in allowed_roles}:
            return current_user
        if str(current_user.id) != str(request.path_params.get(user_id_param)):
            raise ForbiddenError("Operación no permitida para este usuario")
        return current_user

    return checker
