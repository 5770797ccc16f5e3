"""
Data access layer for users.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, or_, select

from tracker.core.exceptions import DuplicateEmail, ValidationFailure
from tracker.core.logging import get_logger
from tracker.db.pagination import PageResult, paginate
from tracker.models.user import User, UserRole
from tracker.schemas.pagination import PageRequest
from tracker.schemas.user import UserFilter

logger = get_logger(__name__)

SORTABLE_FIELDS = {"created_at", "updated_at", "email", "first_name", "last_name", "role", "is_active"}


class UserRepository:
    """
    Pure DB operations on the ``users`` table.
    Each mutating call commits once or rolls back.
    """

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Return a User by primary key, or None if not found."""
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        """Return a User by exact email, or None if not found."""
        statement = select(User).where(User.email == email)
        return self.session.exec(statement).first()

    def exists_by_email(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def list_page(self, user_filter: UserFilter, page_request: PageRequest) -> PageResult[User]:
        """
        Filtered, sorted, paginated listing.

        Args:
            user_filter: Role / active flag equality filters and free-text search
            page_request: Page window and ordering

        Returns:
            Matching users for the page plus pagination metadata
        """
        statement = select(User)

        if user_filter.role is not None:
            statement = statement.where(User.role == user_filter.role)

        if user_filter.is_active is not None:
            statement = statement.where(User.is_active == user_filter.is_active)

        if user_filter.search:
            statement = statement.where(
                or_(
                    col(User.email).icontains(user_filter.search, autoescape=True),
                    col(User.first_name).icontains(user_filter.search, autoescape=True),
                    col(User.last_name).icontains(user_filter.search, autoescape=True),
                )
            )

        return paginate(self.session, User, statement, page_request, SORTABLE_FIELDS)

    def list_active_drivers(self) -> List[User]:
        """Active users with the DRIVER role, by first name."""
        statement = (
            select(User)
            .where(User.role == UserRole.DRIVER, User.is_active == True)  # noqa: E712
            .order_by(col(User.first_name).asc(), col(User.id).asc())
        )
        return list(self.session.exec(statement))

    def create(self, user: User) -> User:
        """Insert a new User and return the persisted row."""
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        return user

    def update(self, user: User) -> User:
        """Persist changes to an existing User and bump ``updated_at``."""
        user.updated_at = datetime.now(timezone.utc)
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        return user

    def delete(self, user: User) -> None:
        """Hard delete a User."""
        # Load every column so the caller still has the last state once detached
        self.session.refresh(user)
        self.session.delete(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Refused to delete user {user.id}: still referenced")
            raise ValidationFailure("User is still referenced by shipments") from e

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            # The only unique column besides the key is email
            self.session.rollback()
            raise DuplicateEmail() from e
