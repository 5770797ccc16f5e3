"""
Authentication service: registration, login and token-to-user resolution.
"""

from dataclasses import dataclass

from tracker.core.exceptions import DuplicateEmail, InvalidCredentials, NotFound
from tracker.core.logging import get_logger
from tracker.core.security import PasswordHasher, TokenService
from tracker.models.user import User, UserRole
from tracker.repositories.user_repository import UserRepository
from tracker.schemas.user import RegisterRequest

logger = get_logger(__name__)


@dataclass
class AuthResult:
    """Issued token and the user it was issued for."""

    token: str
    user: User


class AuthService:
    """
    Orchestrates registration and login.
    Collaborators are passed in explicitly; the service keeps no state of its own.
    """

    def __init__(self, users: UserRepository, password_hasher: PasswordHasher, token_service: TokenService):
        self.users = users
        self.password_hasher = password_hasher
        self.token_service = token_service

    def register(self, register_in: RegisterRequest) -> AuthResult:
        """
        Register a new account and issue a token for it.

        Args:
            register_in: Registration data; role defaults to CUSTOMER

        Returns:
            Token plus the created user

        Raises:
            DuplicateEmail: If the email is already registered
        """
        if self.users.exists_by_email(register_in.email):
            logger.warning(f"Registration attempt with existing email: {register_in.email}")
            raise DuplicateEmail(f"User already exists with email: {register_in.email}")

        user = User(
            email=register_in.email,
            hashed_password=self.password_hasher.hash(register_in.password),
            first_name=register_in.first_name,
            last_name=register_in.last_name,
            role=register_in.role or UserRole.CUSTOMER,
            phone=register_in.phone,
            is_active=True,
        )
        user = self.users.create(user)
        logger.info(f"New user registered: {user.email} (ID: {user.id})")

        return AuthResult(token=self.token_service.issue(user.email), user=user)

    def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate by email and password.

        Unknown email, wrong password and inactive account all raise the
        same error so callers cannot probe which accounts exist.

        Raises:
            InvalidCredentials: If authentication fails for any reason
        """
        user = self.users.get_by_email(email)
        if user is None or not self.password_hasher.matches(password, user.hashed_password):
            logger.warning(f"Failed login attempt for email: {email}")
            raise InvalidCredentials()
        if not user.is_active:
            logger.warning(f"Inactive user {user.id} attempted login")
            raise InvalidCredentials()

        logger.info(f"User logged in: {user.email} (ID: {user.id})")
        return AuthResult(token=self.token_service.issue(user.email), user=user)

    def current_user(self, email: str) -> User:
        """
        Look up the user behind an authenticated identity.

        Raises:
            NotFound: If no user has this email
        """
        user = self.users.get_by_email(email)
        if user is None:
            raise NotFound(f"User not found: {email}")
        return user

    def user_from_token(self, token: str) -> User:
        """
        Resolve a bearer token to its user.

        Token errors (malformed, expired, bad signature) propagate unchanged.
        A token for an account that no longer exists, or is deactivated, is
        rejected as invalid credentials.
        """
        email = self.token_service.extract_subject(token)
        user = self.users.get_by_email(email)
        if user is None or not user.is_active:
            logger.warning(f"Token presented for unknown or inactive account: {email}")
            raise InvalidCredentials("Could not validate credentials")
        return user
