"""
Domain exceptions raised by the service layer.

Each kind carries a stable ``code`` and the HTTP status the API layer maps it
to, so routes never match on message text.
"""

from fastapi import status


class TrackerError(Exception):
    """Base exception for every failure a service reports to its caller."""

    code = "TRACKER_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.__class__.__doc__ or self.code
        super().__init__(self.detail)


class DuplicateEmail(TrackerError):
    """A user with this email already exists."""

    code = "DUPLICATE_EMAIL"
    status_code = status.HTTP_409_CONFLICT


class InvalidCredentials(TrackerError):
    """Invalid email or password."""

    code = "INVALID_CREDENTIALS"
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(TrackerError):
    """The requested record does not exist."""

    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class TokenError(TrackerError):
    """The access token could not be accepted."""

    code = "TOKEN_INVALID"
    status_code = status.HTTP_401_UNAUTHORIZED


class TokenMalformed(TokenError):
    """The access token is not a well-formed JWT."""

    code = "TOKEN_MALFORMED"


class TokenExpired(TokenError):
    """The access token has expired."""

    code = "TOKEN_EXPIRED"


class TokenSignatureInvalid(TokenError):
    """The access token signature does not verify."""

    code = "TOKEN_SIGNATURE_INVALID"


class InvalidPagination(TrackerError):
    """Invalid pagination parameters."""

    code = "INVALID_PAGINATION"
    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailure(TrackerError):
    """The request data is invalid."""

    code = "VALIDATION_FAILURE"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class PermissionDenied(TrackerError):
    """Not enough permissions."""

    code = "PERMISSION_DENIED"
    status_code = status.HTTP_403_FORBIDDEN
