from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker


class Base(DeclarativeBase):
    pass


class Database:
    """Engine and session factory owned by one application instance."""

    def __init__(self, database_url: str, **engine_options) -> None:
        if database_url.startswith("sqlite"):
            engine_options.setdefault("connect_args", {"check_same_thread": False})
        self.engine: Engine = create_engine(database_url, future=True, **engine_options)
        self.session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
