from collections.abc import Callable

from fastapi import Request

from app.application.errors import ValidationError
from app.application.validators import is_uuid


def require_uuid_param(param_name: str = "id") -> Callable[[Request], str]:
    def checker(request: Request) -> str:
        value = request.path_params.get(param_name)
        if not is_uuid(str(value)):
            raise ValidationError("El ID proporcionado no es válido")
        return str(value)

    return checker
