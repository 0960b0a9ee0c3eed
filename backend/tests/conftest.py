from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import delete

from app.config import Settings
from app.domain.roles import UserRole
from app.infrastructure.db.models import User
from app.infrastructure.db.session import Database, get_db
from app.main import create_app
from tests.helpers.factories import create_user


def run_migrations(database_url: str) -> None:
    alembic_config = Config(str(Path(__file__).resolve().parents[1] / "alembic.ini"))
    alembic_config.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(alembic_config, "head")


@pytest.fixture(scope="session")
def database_url(tmp_path_factory):
    return f"sqlite:///{tmp_path_factory.mktemp('db') / 'clinic-test.db'}"


@pytest.fixture(scope="session")
def database(database_url):
    run_migrations(database_url)
    database = Database(database_url)
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture(autouse=True)
def clean_database(database):
    with database.engine.begin() as connection:
        connection.execute(delete(User))


@pytest.fixture
def db_session(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


def _build_client(database, db_session, app_env: str):
    app = create_app(Settings(app_env=app_env, log_cache_loggers=False), database=database)

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(database, db_session):
    app = _build_client(database, db_session, "production")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def debug_client(database, db_session):
    app = _build_client(database, db_session, "development")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_users(db_session):
    admin = create_user(db_session, "admin@example.com", "admin", password="admin123", role=UserRole.admin)
    doctor = create_user(db_session, "doctor@example.com", "doctor", password="doctor123", role=UserRole.doctor)
    patient = create_user(db_session, "patient@example.com", "patient", password="patient123", role=UserRole.patient)
    return {"admin": admin, "doctor": doctor, "patient": patient}
