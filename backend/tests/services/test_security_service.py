import pytest
from jose import ExpiredSignatureError, JWTError, jwt

from app.application.errors import UnauthorizedError, ValidationError
from app.application.services.security_service import (
    authenticate_user,
    create_access_token,
    hash_password,
    read_access_token,
    verify_password,
)
from app.config import settings


def test_token_and_password_helpers(seeded_users):
    """
    Validate security helper primitives for token and password handling.

    1. Create a token for a seeded user and read it back.
    2. Validate the token carries email and role claims.
    3. Hash and verify a password against both valid and invalid values.
    """
    admin = seeded_users["admin"]
    token = create_access_token(admin, expires_minutes=1)
    assert read_access_token(token) == admin.id

    claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    assert claims["email"] == "admin@example.com"
    assert claims["role"] == "ADMIN"

    hashed = hash_password("abc123")
    assert verify_password("abc123", hashed) is True
    assert verify_password("zzz", hashed) is False


def test_read_access_token_propagates_jose_errors(seeded_users):
    """
    Validate token failures stay foreign errors for the translator.

    1. Read an expired token and a malformed token.
    2. Validate jose errors propagate unchanged.
    3. Read a token without subject and validate UnauthorizedError.
    """
    expired = create_access_token(seeded_users["patient"], expires_minutes=-1)
    with pytest.raises(ExpiredSignatureError):
        read_access_token(expired)
    with pytest.raises(JWTError):
        read_access_token("bad-token")

    missing_sub = jwt.encode({"exp": 9999999999}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    with pytest.raises(UnauthorizedError):
        read_access_token(missing_sub)


def test_authenticate_user_success_and_failures(db_session, seeded_users):
    """
    Validate user authentication decision branches.

    1. Authenticate a valid seeded user with the right password.
    2. Validate wrong password and unknown email raise UnauthorizedError.
    3. Validate malformed credentials raise ValidationError.
    """
    user = authenticate_user(db_session, email="Admin@Example.com", password="admin123")
    assert user.id == seeded_users["admin"].id

    with pytest.raises(UnauthorizedError, match="Credenciales inválidas"):
        authenticate_user(db_session, email="admin@example.com", password="wrong")
    with pytest.raises(UnauthorizedError, match="Credenciales inválidas"):
        authenticate_user(db_session, email="missing@example.com", password="admin123")
    with pytest.raises(ValidationError, match="Email y contraseña son requeridos"):
        authenticate_user(db_session, email="", password="admin123")
    with pytest.raises(ValidationError, match="El formato del email no es válido"):
        authenticate_user(db_session, email="admin", password="admin123")
