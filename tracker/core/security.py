"""
Security utilities for password hashing and JWT token management.

Default hashing uses ``pbkdf2_sha256`` for stable cross-platform behavior in
tests and local development. ``bcrypt`` verification is still supported for
hashes imported from older deployments.
"""

import base64
import binascii
import re
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError
from passlib.context import CryptContext

from tracker.core.config import MIN_SECRET_KEY_LENGTH, settings
from tracker.core.exceptions import TokenExpired, TokenMalformed, TokenSignatureInvalid

_BASE64URL = re.compile(r"[A-Za-z0-9_-]+")


class PasswordHasher:
    """One-way salted password hashing backed by passlib."""

    def __init__(self, schemes: list[str] | None = None):
        self._context = CryptContext(schemes=schemes or ["pbkdf2_sha256", "bcrypt"], deprecated="auto")

    def hash(self, plaintext: str) -> str:
        """
        Hash a password using the configured default scheme.

        Args:
            plaintext: Plain text password

        Returns:
            Hashed password string (salt embedded)
        """
        return self._context.hash(plaintext)

    def matches(self, plaintext: str, hashed: str) -> bool:
        """
        Verify a plain password against a stored hash.

        Args:
            plaintext: The plain text password
            hashed: The hashed password to compare against

        Returns:
            True if password matches, False otherwise (including unknown hash formats)
        """
        try:
            return self._context.verify(plaintext, hashed)
        except ValueError:
            return False


class TokenService:
    """
    Issues and validates signed, time-limited identity tokens.

    Holds nothing but its signing configuration, so one instance can be shared
    across requests.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_delta: timedelta = timedelta(hours=1)):
        if len(secret_key) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(f"Signing secret must be at least {MIN_SECRET_KEY_LENGTH} characters long")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expires_delta = expires_delta

    def issue(self, subject: str, now: datetime | None = None) -> str:
        """
        Create a JWT access token for ``subject``.

        ``iat`` is stored with sub-second precision so two tokens for the same
        subject issued at different instants never collide.

        Args:
            subject: Identity to embed (the user's email)
            now: Issuance instant, defaults to the current UTC time

        Returns:
            Encoded JWT token string
        """
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(subject),
            "iat": issued_at.timestamp(),
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def extract_subject(self, token: str) -> str:
        """Return the subject of a valid token."""
        claims = self._decode(token)
        subject = claims.get("sub")
        if not subject:
            raise TokenMalformed("Token has no subject claim")
        return subject

    def extract_expiry(self, token: str) -> datetime:
        """Return the expiry instant (UTC) of a valid token."""
        claims = self._decode(token)
        if "exp" not in claims:
            raise TokenMalformed("Token has no expiry claim")
        return datetime.fromtimestamp(claims["exp"], tz=timezone.utc)

    def verify(self, token: str, expected_subject: str) -> bool:
        """
        Check that ``token`` belongs to ``expected_subject`` and is still live.

        Returns False for a subject mismatch or an expired token. Malformed
        tokens and bad signatures still raise.
        """
        try:
            return self.extract_subject(token) == expected_subject
        except TokenExpired:
            return False

    def _decode(self, token: str) -> dict[str, Any]:
        _check_structure(token)
        try:
            return jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpired("Token has expired") from e
        except JWTClaimsError as e:
            raise TokenMalformed(f"Token claims are invalid: {e}") from e
        except JWTError as e:
            raise TokenSignatureInvalid("Token signature verification failed") from e


def _check_structure(token: str) -> None:
    """Reject anything that is not three base64url segments with JSON header and payload."""
    if not isinstance(token, str):
        raise TokenMalformed("Token must be a string")

    segments = token.split(".")
    if len(segments) != 3 or not all(segments):
        raise TokenMalformed("Token must have three dot-separated segments")

    for segment in segments:
        if not _BASE64URL.fullmatch(segment):
            raise TokenMalformed("Token segment is not valid base64url")
        try:
            base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
        except (binascii.Error, ValueError) as e:
            raise TokenMalformed("Token segment is not valid base64url") from e

    try:
        jwt.get_unverified_header(token)
        jwt.get_unverified_claims(token)
    except JWTError as e:
        raise TokenMalformed("Token header or payload is not valid JSON") from e


password_hasher = PasswordHasher()

token_service = TokenService(
    secret_key=settings.SECRET_KEY,
    algorithm=settings.ALGORITHM,
    expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
)
