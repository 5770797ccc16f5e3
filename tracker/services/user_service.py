"""
User service layer implementing business logic for user management.
"""

from typing import List

from tracker.core.exceptions import DuplicateEmail, NotFound
from tracker.core.logging import get_logger
from tracker.core.security import PasswordHasher
from tracker.db.pagination import PageResult
from tracker.models.user import User, UserRole
from tracker.repositories.user_repository import UserRepository
from tracker.schemas.pagination import PageRequest
from tracker.schemas.user import UserCreate, UserFilter, UserUpdate

logger = get_logger(__name__)


class UserService:
    """Service class for user-related operations."""

    def __init__(self, users: UserRepository, password_hasher: PasswordHasher):
        self.users = users
        self.password_hasher = password_hasher

    def list_users(self, user_filter: UserFilter, page_request: PageRequest) -> PageResult[User]:
        return self.users.list_page(user_filter, page_request)

    def get_user(self, user_id: str) -> User:
        """
        Retrieve a user by ID.

        Raises:
            NotFound: If no user has this ID
        """
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFound(f"User not found with id: {user_id}")
        return user

    def list_drivers(self) -> List[User]:
        """Active drivers, for assignment pickers."""
        return self.users.list_active_drivers()

    def create_user(self, user_in: UserCreate) -> User:
        """
        Create a user on behalf of an administrator.

        Args:
            user_in: User data including plaintext password

        Returns:
            Created user instance

        Raises:
            DuplicateEmail: If the email is already registered
        """
        if self.users.exists_by_email(user_in.email):
            raise DuplicateEmail(f"User already exists with email: {user_in.email}")

        user = User(
            email=user_in.email,
            hashed_password=self.password_hasher.hash(user_in.password),
            first_name=user_in.first_name,
            last_name=user_in.last_name,
            role=user_in.role or UserRole.CUSTOMER,
            phone=user_in.phone,
            is_active=user_in.is_active,
        )
        user = self.users.create(user)
        logger.info(f"User created: {user.email} (ID: {user.id}, role: {user.role.value})")
        return user

    def update_user(self, user_id: str, user_in: UserUpdate) -> User:
        """
        Apply a partial update. Fields left out of the request keep their value.

        Raises:
            NotFound: If no user has this ID
            DuplicateEmail: If the new email belongs to another user
        """
        user = self.get_user(user_id)
        changes = user_in.model_dump(exclude_unset=True, exclude_none=True)

        new_email = changes.get("email")
        if new_email and new_email != user.email and self.users.exists_by_email(new_email):
            raise DuplicateEmail(f"User already exists with email: {new_email}")

        for field, value in changes.items():
            setattr(user, field, value)

        user = self.users.update(user)
        logger.info(f"User updated: {user.id} ({', '.join(sorted(changes)) or 'no changes'})")
        return user

    def delete_user(self, user_id: str) -> User:
        """
        Hard delete a user.

        Returns:
            The user as it was just before deletion
        """
        user = self.get_user(user_id)
        self.users.delete(user)
        logger.info(f"User deleted: {user.email} (ID: {user_id})")
        return user

    @staticmethod
    def is_admin(user: User) -> bool:
        return user.role == UserRole.ADMIN

    @staticmethod
    def is_staff(user: User) -> bool:
        """Admins and dispatchers manage shipments and accounts."""
        return user.role in (UserRole.ADMIN, UserRole.DISPATCHER)
