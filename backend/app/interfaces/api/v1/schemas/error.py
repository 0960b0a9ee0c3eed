from pydantic import BaseModel, ConfigDict, Field


class ErrorInfo(BaseModel):
    name: str
    is_operational: bool = Field(alias="isOperational")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    """Body of every error response; debug-only fields are omitted in production."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "error"
    status_code: int = Field(alias="statusCode")
    message: str
    timestamp: str
    path: str
    method: str
    stack: str | None = None
    error: ErrorInfo | None = None
    validation_errors: list[str] | None = Field(default=None, alias="validationErrors")


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
    403: {"model": ErrorResponse, "description": "Operation not allowed"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    409: {"model": ErrorResponse, "description": "Conflict with current state"},
}
