"""
Tests for the token service and password hasher.
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt
from pydantic import ValidationError

from tracker.core.config import Settings
from tracker.core.exceptions import TokenExpired, TokenMalformed, TokenSignatureInvalid
from tracker.core.security import PasswordHasher, TokenService

SECRET = "unit-test-secret-key-with-at-least-32-chars"


@pytest.fixture(name="tokens")
def tokens_fixture() -> TokenService:
    return TokenService(secret_key=SECRET, expires_delta=timedelta(hours=1))


def test_issue_then_extract_subject(tokens: TokenService) -> None:
    """The subject survives a round trip."""
    token = tokens.issue("a@x.com")
    assert tokens.extract_subject(token) == "a@x.com"


def test_token_has_three_segments(tokens: TokenService) -> None:
    assert len(tokens.issue("a@x.com").split(".")) == 3


def test_verify_matching_subject(tokens: TokenService) -> None:
    token = tokens.issue("a@x.com")
    assert tokens.verify(token, "a@x.com") is True


def test_verify_other_subject_is_false(tokens: TokenService) -> None:
    token = tokens.issue("a@x.com")
    assert tokens.verify(token, "b@x.com") is False


def test_expiry_is_issue_time_plus_duration(tokens: TokenService) -> None:
    now = datetime.now(timezone.utc).replace(microsecond=0)
    token = tokens.issue("a@x.com", now=now)
    assert tokens.extract_expiry(token) == now + timedelta(hours=1)


def test_tokens_issued_at_different_instants_differ(tokens: TokenService) -> None:
    now = datetime.now(timezone.utc)
    first = tokens.issue("a@x.com", now=now)
    second = tokens.issue("a@x.com", now=now + timedelta(milliseconds=1))
    assert first != second


def test_issue_is_deterministic_for_same_instant(tokens: TokenService) -> None:
    now = datetime.now(timezone.utc)
    assert tokens.issue("a@x.com", now=now) == tokens.issue("a@x.com", now=now)


def test_expired_token_raises() -> None:
    """A token whose lifetime has elapsed is rejected as expired."""
    tokens = TokenService(secret_key=SECRET, expires_delta=timedelta(seconds=1))
    token = tokens.issue("a@x.com", now=datetime.now(timezone.utc) - timedelta(minutes=5))

    with pytest.raises(TokenExpired):
        tokens.extract_subject(token)
    with pytest.raises(TokenExpired):
        tokens.extract_expiry(token)


def test_verify_is_false_once_expired() -> None:
    tokens = TokenService(secret_key=SECRET, expires_delta=timedelta(seconds=-1))
    token = tokens.issue("a@x.com")
    assert tokens.verify(token, "a@x.com") is False


def test_wrong_secret_raises_signature_invalid(tokens: TokenService) -> None:
    other = TokenService(secret_key="another-secret-key-with-at-least-32-chars!")
    token = other.issue("a@x.com")

    with pytest.raises(TokenSignatureInvalid):
        tokens.extract_subject(token)


def test_tampered_payload_raises_signature_invalid(tokens: TokenService) -> None:
    header, _, signature = tokens.issue("a@x.com").split(".")
    forged_claims = {"sub": "admin@x.com", "exp": int(datetime.now(timezone.utc).timestamp()) + 3600}
    forged_payload = base64.urlsafe_b64encode(json.dumps(forged_claims).encode()).rstrip(b"=").decode()

    with pytest.raises(TokenSignatureInvalid):
        tokens.extract_subject(f"{header}.{forged_payload}.{signature}")


@pytest.mark.parametrize(
    "token",
    [
        "",
        "not-a-token",
        "only.two",
        "a.b.c.d",
        "abc.def.",
        "ab!c.def.ghi",
        "eyJhbGciOiJIUzI1NiJ9.bm90LWpzb24.c2ln",
    ],
)
def test_malformed_tokens_raise(tokens: TokenService, token: str) -> None:
    with pytest.raises(TokenMalformed):
        tokens.extract_subject(token)


def test_token_without_subject_is_malformed(tokens: TokenService) -> None:
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    token = jwt.encode({"exp": exp}, SECRET, algorithm="HS256")

    with pytest.raises(TokenMalformed):
        tokens.extract_subject(token)


def test_short_secret_rejected_at_construction() -> None:
    with pytest.raises(ValueError):
        TokenService(secret_key="too-short")


def test_short_secret_rejected_by_settings() -> None:
    """Startup fails instead of the first token issuance."""
    with pytest.raises(ValidationError):
        Settings(SECRET_KEY="too-short")


def test_password_hash_is_salted() -> None:
    hasher = PasswordHasher()
    first = hasher.hash("pw1")
    second = hasher.hash("pw1")

    assert first != second
    assert hasher.matches("pw1", first)
    assert hasher.matches("pw1", second)


def test_password_mismatch() -> None:
    hasher = PasswordHasher()
    assert hasher.matches("wrong", hasher.hash("pw1")) is False


def test_unknown_hash_format_does_not_match() -> None:
    assert PasswordHasher().matches("pw1", "not-a-hash") is False
