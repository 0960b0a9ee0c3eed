from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.infrastructure.logging import get_logger

logger = get_logger(__name__)


def get_health_status(db: Session) -> dict:
    db_connected = False
    try:
        db.execute(text("SELECT 1"))
        db_connected = True
    except SQLAlchemyError as exc:
        logger.warning("health_db_unavailable", error=str(exc))

    return {
        "status": "ok" if db_connected else "degraded",
        "db_connected": db_connected,
    }
