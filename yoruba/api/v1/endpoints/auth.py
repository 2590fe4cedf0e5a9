from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from yoruba.core.config import settings
from yoruba.core.database import get_session
from yoruba.models.models import User
from yoruba.schemas.auth import LoginRequest, RegisterRequest, AuthResponse, UserResponse
from yoruba.services.user_service import register_user, authenticate_user

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_response(user: User) -> UserResponse:
    response = UserResponse.model_validate(user)
    response.max_lives = settings.max_lives
    return response


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    session: Session = Depends(get_session)
):
    """Login with username/email and password."""
    user = authenticate_user(session, login_data.username, login_data.password)
    return AuthResponse(user=_user_response(user), message="Login successful")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    session: Session = Depends(get_session)
):
    """Register a new user."""
    user = register_user(
        session,
        username=register_data.username,
        password=register_data.password,
        email=register_data.email
    )
    return AuthResponse(user=_user_response(user), message="Registration successful")
