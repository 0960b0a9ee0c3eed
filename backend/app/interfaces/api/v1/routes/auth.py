from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.application.services.security_service import authenticate_user, create_access_token
from app.infrastructure.db.session import get_db
from app.interfaces.api.v1.schemas.auth import LoginRequest, TokenResponse
from app.interfaces.api.v1.schemas.error import ERROR_RESPONSES
from app.interfaces.api.v1.schemas.user import UserResponse

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Issue access token",
    description="Authenticate with email and password and return a bearer token for protected endpoints.",
    responses={code: ERROR_RESPONSES[code] for code in (400, 401)},
)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db=db, email=payload.email, password=payload.password)
    return TokenResponse(access_token=create_access_token(user), user=UserResponse.model_validate(user))
