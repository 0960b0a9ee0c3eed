from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.application.errors import ConflictError, ForbiddenError, NotFoundError, UnauthorizedError
from app.application.services.security_service import hash_password, verify_password
from app.application.validators import validate_create_user, validate_password_change, validate_update_user
from app.domain.roles import UserRole
from app.infrastructure.db.models import User
from app.infrastructure.logging import get_logger
from app.interfaces.api.v1.schemas.user import PasswordChange, UserCreate, UserUpdate

logger = get_logger(__name__)


def normalize_user_id(user_id: str) -> str:
    return str(UUID(user_id))


def get_user_by_id(db: Session, user_id: str) -> User:
    user = db.execute(select(User).where(User.id == normalize_user_id(user_id))).scalar_one_or_none()
    if user is None:
        raise NotFoundError("Usuario no encontrado")
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def create_user(db: Session, payload: UserCreate) -> User:
    validate_create_user(payload.model_dump(mode="json"))
    email = payload.email.strip().lower()
    username = payload.username.strip()

    existing_user = db.execute(
        select(User).where(or_(User.email == email, User.username == username))
    ).scalars().first()
    if existing_user is not None:
        field = "email" if existing_user.email == email else "username"
        raise ConflictError(f"El {field} ya está registrado")

    user = User(
        email=email,
        username=username,
        hashed_password=hash_password(payload.password),
        role=payload.role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user_created", user_id=user.id)
    return user


def update_user(db: Session, user_id: str, payload: UserUpdate, acting_user: User) -> User:
    changes = validate_update_user(payload.model_dump(mode="json", exclude_none=True))
    if "role" in changes and acting_user.role != UserRole.admin.value:
        raise ForbiddenError("Solo un administrador puede cambiar el rol")
    user = db.execute(select(User).where(User.id == normalize_user_id(user_id))).scalar_one()

    if "email" in changes:
        user.email = changes["email"].lower()
    if "username" in changes:
        user.username = changes["username"]
    if "role" in changes:
        user.role = changes["role"]

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(user)
    return user


def change_password(db: Session, user_id: str, payload: PasswordChange) -> None:
    validate_password_change(payload.model_dump())
    user = get_user_by_id(db=db, user_id=user_id)
    if not verify_password(payload.current_password, user.hashed_password):
        raise UnauthorizedError("La contraseña actual es incorrecta")

    user.hashed_password = hash_password(payload.new_password)
    db.commit()


def delete_user(db: Session, user_id: str) -> None:
    user = db.execute(select(User).where(User.id == normalize_user_id(user_id))).scalar_one()
    db.delete(user)
    db.commit()
    logger.info("user_deleted", user_id=user_id)
