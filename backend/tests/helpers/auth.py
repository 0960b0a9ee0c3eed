from app.application.services.security_service import create_access_token
from app.infrastructure.db.models import User


def login(client, email: str, password: str) -> str:
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["access_token"]


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def token_for_user(user: User) -> str:
    return create_access_token(user)
