from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.domain.roles import UserRole
from app.interfaces.api.v1.schemas.pagination import PaginationMeta


class UserCreate(BaseModel):
    email: str
    username: str
    password: str
    role: UserRole = UserRole.user


class UserUpdate(BaseModel):
    email: str | None = None
    username: str | None = None
    role: UserRole | None = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    username: str
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    items: list[UserResponse]
    pagination: PaginationMeta
