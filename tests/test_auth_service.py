"""
Tests for the authentication service without the HTTP layer.
"""

import pytest

from tracker.core.exceptions import DuplicateEmail, InvalidCredentials, NotFound
from tracker.models.user import UserRole
from tracker.schemas.user import RegisterRequest, UserResponse, UserUpdate
from tracker.services.auth_service import AuthService
from tracker.services.user_service import UserService


def make_request(email: str = "a@x.com", password: str = "pw1", **extra) -> RegisterRequest:
    return RegisterRequest(email=email, password=password, first_name="A", last_name="One", **extra)


def test_register_hashes_password(auth_service: AuthService) -> None:
    result = auth_service.register(make_request())

    assert result.token
    assert result.user.hashed_password != "pw1"
    assert auth_service.password_hasher.matches("pw1", result.user.hashed_password)


def test_register_defaults(auth_service: AuthService) -> None:
    user = auth_service.register(make_request()).user
    assert user.role == UserRole.CUSTOMER
    assert user.is_active is True
    assert user.id


def test_register_token_subject_is_email(auth_service: AuthService) -> None:
    result = auth_service.register(make_request())
    assert auth_service.token_service.verify(result.token, "a@x.com")


def test_register_duplicate(auth_service: AuthService) -> None:
    auth_service.register(make_request())
    with pytest.raises(DuplicateEmail):
        auth_service.register(make_request(password="pw2"))


def test_email_match_is_case_sensitive(auth_service: AuthService) -> None:
    auth_service.register(make_request())
    with pytest.raises(InvalidCredentials):
        auth_service.login("A@x.com", "pw1")


def test_email_domain_is_lowercased_on_input(auth_service: AuthService) -> None:
    user = auth_service.register(make_request(email="a@X.com")).user

    assert user.email == "a@x.com"
    assert auth_service.login("a@x.com", "pw1").user.id == user.id
    with pytest.raises(DuplicateEmail):
        auth_service.register(make_request(email="a@x.com"))


def test_login_wrong_password(auth_service: AuthService) -> None:
    auth_service.register(make_request())
    with pytest.raises(InvalidCredentials):
        auth_service.login("a@x.com", "wrong")


def test_login_unknown_email(auth_service: AuthService) -> None:
    with pytest.raises(InvalidCredentials):
        auth_service.login("nobody@x.com", "pw1")


def test_login_inactive_account(auth_service: AuthService, user_service: UserService) -> None:
    user = auth_service.register(make_request()).user
    user_service.update_user(user.id, UserUpdate(is_active=False))

    with pytest.raises(InvalidCredentials):
        auth_service.login("a@x.com", "pw1")


def test_returned_user_never_exposes_password(auth_service: AuthService) -> None:
    """The outward representation has no password field even right after creation."""
    result = auth_service.register(make_request())
    payload = UserResponse.model_validate(result.user).model_dump()

    assert "hashed_password" not in payload
    assert "password" not in payload
    assert "pw1" not in payload.values()


def test_current_user(auth_service: AuthService) -> None:
    auth_service.register(make_request())
    assert auth_service.current_user("a@x.com").email == "a@x.com"


def test_current_user_not_found(auth_service: AuthService) -> None:
    with pytest.raises(NotFound):
        auth_service.current_user("nobody@x.com")
