from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.application.services.pagination_service import paginate_scalars
from app.application.services.user_service import (
    change_password,
    create_user,
    delete_user,
    get_user_by_id,
    update_user,
)
from app.domain.roles import UserRole
from app.infrastructure.db.models import User
from app.infrastructure.db.session import get_db
from app.interfaces.api.v1.dependencies.auth import require_authenticated, require_roles, require_self_or_roles
from app.interfaces.api.v1.dependencies.identifiers import require_uuid_param
from app.interfaces.api.v1.dependencies.pagination import get_pagination_params
from app.interfaces.api.v1.schemas.error import ERROR_RESPONSES
from app.interfaces.api.v1.schemas.pagination import PaginationParams
from app.interfaces.api.v1.schemas.user import PasswordChange, UserCreate, UserListResponse, UserResponse, UserUpdate

router = APIRouter(prefix="/users", tags=["users"], responses=ERROR_RESPONSES)

valid_user_id = require_uuid_param("user_id")


@router.get("", response_model=UserListResponse, dependencies=[Depends(require_authenticated)])
def get_users(
    pagination: PaginationParams = Depends(get_pagination_params),
    db: Session = Depends(get_db),
):
    users, meta = paginate_scalars(
        db=db,
        base_query=select(User).order_by(User.created_at.desc(), User.id),
        params=pagination,
        search_columns=[User.email, User.username],
    )
    return {"items": users, "pagination": meta}


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user_endpoint(payload: UserCreate, db: Session = Depends(get_db)):
    return create_user(db=db, payload=payload)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(require_authenticated)):
    return current_user


@router.get("/{user_id}", response_model=UserResponse, dependencies=[Depends(valid_user_id)])
def get_user(user_id: str, db: Session = Depends(get_db)):
    return get_user_by_id(db=db, user_id=user_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    dependencies=[Depends(valid_user_id), Depends(require_self_or_roles("user_id", [UserRole.admin]))],
)
def update_user_endpoint(
    user_id: str,
    payload: UserUpdate,
    current_user: User = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    return update_user(db=db, user_id=user_id, payload=payload, acting_user=current_user)


@router.patch(
    "/{user_id}/password",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(valid_user_id), Depends(require_self_or_roles("user_id", []))],
)
def change_password_endpoint(user_id: str, payload: PasswordChange, db: Session = Depends(get_db)):
    change_password(db=db, user_id=user_id, payload=payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(valid_user_id), Depends(require_roles([UserRole.admin]))],
)
def delete_user_endpoint(user_id: str, db: Session = Depends(get_db)):
    delete_user(db=db, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
