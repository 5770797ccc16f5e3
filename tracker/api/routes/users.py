"""
User management routes.
Listing and lookups are open to staff; mutations are admin-only.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status

from tracker.api.deps import AdminUser, StaffUser, get_page_request, get_user_service
from tracker.models.user import UserRole
from tracker.schemas.pagination import PageRequest
from tracker.schemas.user import PaginatedUsers, UserCreate, UserFilter, UserResponse, UserUpdate
from tracker.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.get("", response_model=PaginatedUsers)
def list_users(
    current_user: StaffUser,
    user_service: UserServiceDep,
    page_request: Annotated[PageRequest, Depends(get_page_request)],
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    search: Annotated[Optional[str], Query(description="Substring of email, first or last name")] = None,
) -> PaginatedUsers:
    """
    Paginated user listing with optional role / active filters and search.

    Raises:
        InvalidPagination: page < 1, limit out of range or unknown sort field (400)
    """
    page = user_service.list_users(UserFilter(role=role, is_active=is_active, search=search), page_request)
    return PaginatedUsers(
        data=[UserResponse.model_validate(user) for user in page.data],
        meta=page.meta,
    )


@router.get("/drivers", response_model=List[UserResponse])
def list_drivers(current_user: StaffUser, user_service: UserServiceDep) -> List[UserResponse]:
    """Active drivers, ordered by first name."""
    return [UserResponse.model_validate(user) for user in user_service.list_drivers()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, current_user: StaffUser, user_service: UserServiceDep) -> UserResponse:
    return UserResponse.model_validate(user_service.get_user(user_id))


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user_in: UserCreate, current_user: AdminUser, user_service: UserServiceDep) -> UserResponse:
    """
    Create a user of any role.

    Raises:
        DuplicateEmail: If email already registered (409)
    """
    return UserResponse.model_validate(user_service.create_user(user_in))


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    user_in: UserUpdate,
    current_user: AdminUser,
    user_service: UserServiceDep,
) -> UserResponse:
    """Partial update of profile, role or active flag."""
    return UserResponse.model_validate(user_service.update_user(user_id, user_in))


@router.delete("/{user_id}", response_model=UserResponse)
def delete_user(user_id: str, current_user: AdminUser, user_service: UserServiceDep) -> UserResponse:
    """Hard delete; returns the user as it was before deletion."""
    return UserResponse.model_validate(user_service.delete_user(user_id))
