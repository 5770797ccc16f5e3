"""
Authentication routes for registration, login and the current-user query.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from tracker.api.deps import CurrentUser, get_auth_service
from tracker.schemas.auth import AuthResponse, LoginRequest
from tracker.schemas.user import RegisterRequest, UserResponse
from tracker.services.auth_service import AuthResult, AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def _to_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(access_token=result.token, user=UserResponse.model_validate(result.user))


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(register_in: RegisterRequest, auth_service: AuthServiceDep) -> AuthResponse:
    """
    Register a new user and log them in.

    Raises:
        DuplicateEmail: If email already registered (409)
    """
    return _to_response(auth_service.register(register_in))


@router.post("/login", response_model=AuthResponse)
def login(login_in: LoginRequest, auth_service: AuthServiceDep) -> AuthResponse:
    """
    Log in with email and password.

    Raises:
        InvalidCredentials: Unknown email, wrong password or inactive account (401)
    """
    return _to_response(auth_service.login(login_in.email, login_in.password))


@router.post("/token", response_model=AuthResponse)
def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    OAuth2 compatible token login (form fields ``username`` and ``password``),
    used by the interactive API docs.
    """
    return _to_response(auth_service.login(form_data.username, form_data.password))


@router.get("/me", response_model=UserResponse)
def me(current_user: CurrentUser) -> UserResponse:
    """Profile of the user the bearer token was issued for."""
    return UserResponse.model_validate(current_user)
