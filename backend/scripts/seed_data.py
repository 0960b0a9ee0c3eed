from sqlalchemy import select
from sqlalchemy.orm import Session

from app.application.services.security_service import hash_password
from app.config import settings
from app.domain.roles import UserRole
from app.infrastructure.db.models import User
from app.infrastructure.db.session import Database
from app.infrastructure.logging import configure_logging, get_logger

logger = get_logger(__name__)

SEED_USERS = [
    ("admin@example.com", "admin", "admin123", UserRole.admin),
    ("doctor@example.com", "doctor", "doctor123", UserRole.doctor),
    ("patient@example.com", "patient", "patient123", UserRole.patient),
]


def create_user_if_missing(db: Session, email: str, username: str, password: str, role: UserRole) -> User:
    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing is not None:
        return existing

    user = User(email=email, username=username, hashed_password=hash_password(password), role=role.value)
    db.add(user)
    db.flush()
    logger.info("seed_user_created", email=email, role=role.value)
    return user


def main() -> None:
    configure_logging(settings)
    database = Database(settings.database_url)
    db = database.session()
    try:
        for email, username, password, role in SEED_USERS:
            create_user_if_missing(db=db, email=email, username=username, password=password, role=role)
        db.commit()
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
