from app.application.services.security_service import create_access_token

from tests.helpers.auth import auth_header, login
from tests.helpers.factories import create_user


def test_login_success_and_invalid_credentials(client, seeded_users):
    """
    Validate auth login endpoint contract for success and failures.

    1. Request a token with valid seeded credentials.
    2. Validate access token and user payload in the successful response.
    3. Request a token with wrong password and unknown user.
    4. Validate invalid credential attempts return the error envelope with 401.
    """
    ok = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "admin123"})
    assert ok.status_code == 200
    assert ok.json()["token_type"] == "bearer"
    assert ok.json()["user"]["role"] == "ADMIN"
    assert "access_token" in ok.json()

    wrong_password = client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "wrong"})
    assert wrong_password.status_code == 401
    assert wrong_password.json()["message"] == "Credenciales inválidas"

    unknown = client.post("/api/v1/auth/login", json={"email": "unknown@example.com", "password": "admin123"})
    assert unknown.status_code == 401
    assert unknown.json()["statusCode"] == 401


def test_login_rejects_missing_and_malformed_credentials(client):
    missing = client.post("/api/v1/auth/login", json={"email": "", "password": ""})
    assert missing.status_code == 400
    assert missing.json()["message"] == "Email y contraseña son requeridos"

    malformed = client.post("/api/v1/auth/login", json={"email": "admin", "password": "admin123"})
    assert malformed.status_code == 400
    assert malformed.json()["message"] == "El formato del email no es válido"


def test_protected_route_token_failures(client, db_session):
    """
    Validate bearer token failures on a protected route.

    1. Call a protected route without a token.
    2. Call it with a malformed and an expired token.
    3. Validate every failure is a 401 with a specific message.
    """
    missing = client.get("/api/v1/users/me")
    assert missing.status_code == 401
    assert missing.json()["message"] == "Token de autenticación requerido"
    assert missing.headers["www-authenticate"] == "Bearer"

    invalid = client.get("/api/v1/users/me", headers=auth_header("invalid-token"))
    assert invalid.status_code == 401
    assert invalid.json()["message"] == "Token inválido"

    user = create_user(db_session, "expiring@example.com", "expiring")
    expired = client.get("/api/v1/users/me", headers=auth_header(create_access_token(user, expires_minutes=-1)))
    assert expired.status_code == 401
    assert expired.json()["message"] == "Token expirado"


def test_token_for_removed_user_is_rejected(client, seeded_users):
    """
    Validate tokens of removed users.

    1. Issue a token for the patient user.
    2. Remove the patient through the admin account.
    3. Call a protected route with the patient's token.
    4. Validate the request is rejected as unauthorized.
    """
    patient_token = login(client, "patient@example.com", "patient123")
    admin_token = login(client, "admin@example.com", "admin123")
    removed = client.delete(f"/api/v1/users/{seeded_users['patient'].id}", headers=auth_header(admin_token))
    assert removed.status_code == 204

    response = client.get("/api/v1/users/me", headers=auth_header(patient_token))
    assert response.status_code == 401
    assert response.json()["message"] == "Usuario no encontrado o inactivo"
