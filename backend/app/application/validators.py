import re
from collections.abc import Iterable, Mapping
from typing import Any

from app.application.errors import ValidationError
from app.domain.roles import UserRole

REGEX = {
    "email": re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"),
    "uuid": re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE),
    "username": re.compile(r"^[a-zA-Z0-9_-]{2,50}$"),
}

PASSWORD_MIN_LENGTH = 6
ALLOWED_UPDATE_FIELDS = ("email", "username", "role")
INVALID_EMAIL_MESSAGE = "El formato del email no es válido"
INVALID_USERNAME_MESSAGE = (
    "El nombre de usuario debe tener entre 2 y 50 caracteres y solo contener letras, números, guiones o guiones bajos"
)


def _matches(pattern: str, value: Any) -> bool:
    if not value or not isinstance(value, str):
        return False
    return REGEX[pattern].match(value.strip()) is not None


def is_valid_email(email: Any) -> bool:
    return _matches("email", email)


def is_valid_username(username: Any) -> bool:
    return _matches("username", username)


def is_uuid(value: Any) -> bool:
    return _matches("uuid", value)


def sanitize_string(value: Any) -> str:
    if not value or not isinstance(value, str):
        return ""
    return value.strip().replace("<", "").replace(">", "")


def sanitize_input(data: Mapping[str, Any] | None, allowed_fields: Iterable[str]) -> dict[str, Any]:
    if not data:
        return {}
    sanitized: dict[str, Any] = {}
    for field in allowed_fields:
        if data.get(field) is not None:
            value = data[field]
            sanitized[field] = sanitize_string(value) if isinstance(value, str) else value
    return sanitized


def throw_validation_errors(errors: list[str], message: str = "Errores de validación") -> None:
    if errors:
        raise ValidationError(message, errors)


def validate_required_fields(data: Mapping[str, Any] | None, required_fields: Iterable[str]) -> None:
    if data is None:
        raise ValidationError("Los datos proporcionados no son válidos")

    missing = []
    for field in required_fields:
        value = data.get(field)
        if not value or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    throw_validation_errors([f"El campo '{field}' es requerido" for field in missing], "Faltan campos requeridos")


def _role_errors(role: Any) -> list[str]:
    allowed = [role.value for role in UserRole]
    if role is not None and role not in allowed:
        return [f"El rol debe ser uno de: {', '.join(allowed)}"]
    return []


def validate_create_user(data: Mapping[str, Any]) -> None:
    validate_required_fields(data, ["email", "username", "password"])

    errors: list[str] = []
    if not is_valid_email(data["email"]):
        errors.append(INVALID_EMAIL_MESSAGE)
    if len(data["password"]) < PASSWORD_MIN_LENGTH:
        errors.append(f"La contraseña debe tener al menos {PASSWORD_MIN_LENGTH} caracteres")
    if not is_valid_username(data["username"]):
        errors.append(INVALID_USERNAME_MESSAGE)
    errors.extend(_role_errors(data.get("role")))
    throw_validation_errors(errors)


def validate_update_user(updates: Mapping[str, Any]) -> dict[str, Any]:
    sanitized = sanitize_input(updates, ALLOWED_UPDATE_FIELDS)
    if not sanitized:
        raise ValidationError(
            "No se proporcionaron campos válidos para actualizar",
            ["Los campos permitidos son: " + ", ".join(ALLOWED_UPDATE_FIELDS)],
        )

    errors: list[str] = []
    if "email" in sanitized and not is_valid_email(sanitized["email"]):
        errors.append(INVALID_EMAIL_MESSAGE)
    if "username" in sanitized and not is_valid_username(sanitized["username"]):
        errors.append(INVALID_USERNAME_MESSAGE)
    errors.extend(_role_errors(sanitized.get("role")))
    throw_validation_errors(errors)
    return sanitized


def validate_password_change(data: Mapping[str, Any]) -> None:
    if not data.get("current_password") or not data.get("new_password"):
        raise ValidationError("Se requieren la contraseña actual y la nueva")
    if len(data["new_password"]) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"La nueva contraseña debe tener al menos {PASSWORD_MIN_LENGTH} caracteres")


def validate_login(credentials: Mapping[str, Any]) -> None:
    if not credentials.get("email") or not credentials.get("password"):
        raise ValidationError("Email y contraseña son requeridos")
    if not is_valid_email(credentials["email"]):
        raise ValidationError(INVALID_EMAIL_MESSAGE)
