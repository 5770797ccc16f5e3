"""
API dependencies for FastAPI dependency injection.
Builds repositories and services per request and provides authentication
and role checks.
"""

from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from tracker.core.config import settings
from tracker.core.exceptions import PermissionDenied
from tracker.core.logging import get_logger
from tracker.core.security import PasswordHasher, TokenService, password_hasher, token_service
from tracker.db.session import get_session
from tracker.models.user import User
from tracker.repositories.shipment_repository import ShipmentRepository
from tracker.repositories.user_repository import UserRepository
from tracker.schemas.pagination import PageRequest
from tracker.services.auth_service import AuthService
from tracker.services.shipment_service import ShipmentService
from tracker.services.user_service import UserService

logger = get_logger(__name__)

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/token")

SessionDep = Annotated[Session, Depends(get_session)]


def get_password_hasher() -> PasswordHasher:
    return password_hasher


def get_token_service() -> TokenService:
    return token_service


def get_user_repository(session: SessionDep) -> UserRepository:
    return UserRepository(session)


def get_shipment_repository(session: SessionDep) -> ShipmentRepository:
    return ShipmentRepository(session)


def get_auth_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    return AuthService(users, hasher, tokens)


def get_user_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    return UserService(users, hasher)


def get_shipment_service(
    shipments: Annotated[ShipmentRepository, Depends(get_shipment_repository)],
) -> ShipmentService:
    return ShipmentService(shipments)


def get_page_request(
    page: Annotated[int, Query(description="1-based page number")] = 1,
    limit: Annotated[int, Query(description="Page size")] = settings.DEFAULT_PAGE_SIZE,
    sort_by: Annotated[str, Query(description="Field to sort on")] = "createdAt",
    sort_order: Annotated[str, Query(description="'asc' or 'desc'")] = "desc",
) -> PageRequest:
    """Collect pagination query parameters. Range checks happen in the store layer."""
    return PageRequest(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)


def get_current_user(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    token: Annotated[str, Depends(oauth2_scheme)],
) -> User:
    """
    Dependency to get the current authenticated user from the bearer token.

    Raises:
        TokenMalformed, TokenExpired, TokenSignatureInvalid: If the token is rejected
        InvalidCredentials: If the token's account is gone or inactive
    """
    return auth_service.user_from_token(token)


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_current_staff_user(current_user: CurrentUser) -> User:
    """
    Dependency to ensure the current user is an admin or dispatcher.

    Raises:
        PermissionDenied: For drivers and customers
    """
    if not UserService.is_staff(current_user):
        logger.warning(f"Non-staff user {current_user.id} attempted staff access")
        raise PermissionDenied()
    return current_user


def get_current_admin_user(current_user: CurrentUser) -> User:
    """
    Dependency to ensure the current user is an admin.

    Raises:
        PermissionDenied: If the user is not an admin
    """
    if not UserService.is_admin(current_user):
        logger.warning(f"Non-admin user {current_user.id} attempted admin access")
        raise PermissionDenied()
    return current_user


StaffUser = Annotated[User, Depends(get_current_staff_user)]
AdminUser = Annotated[User, Depends(get_current_admin_user)]
