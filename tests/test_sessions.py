from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from save_server.core.errors import TokenExpired, TokenInvalid
from save_server.core.sessions import ALGORITHM, Identity, SessionTokens


SECRET = "unit-test-secret"
BOB = Identity(user_id=7, username="bob")


@pytest.fixture
def tokens():
    return SessionTokens(SECRET)


def _ago(**kwargs):
    return datetime.now(timezone.utc) - timedelta(**kwargs)


def test_issue_then_verify(tokens):
    assert tokens.verify(tokens.issue(BOB)) == BOB


def test_claims_carry_identity_and_two_hour_expiry(tokens):
    claims = jwt.get_unverified_claims(tokens.issue(BOB))

    assert claims["user_id"] == 7
    assert claims["username"] == "bob"
    assert claims["exp"] - claims["iat"] == 2 * 60 * 60


def test_token_still_valid_just_before_expiry(tokens):
    token = tokens.issue(BOB, now=_ago(hours=1, minutes=59))
    assert tokens.verify(token) == BOB


def test_token_expires_after_two_hours(tokens):
    token = tokens.issue(BOB, now=_ago(hours=2, minutes=1))

    with pytest.raises(TokenExpired):
        tokens.verify(token)


def test_wrong_secret_is_invalid(tokens):
    token = SessionTokens("another-secret").issue(BOB)

    with pytest.raises(TokenInvalid):
        tokens.verify(token)


def test_signature_is_checked_before_expiry(tokens):
    token = SessionTokens("another-secret").issue(BOB, now=_ago(hours=5))

    with pytest.raises(TokenInvalid):
        tokens.verify(token)


def test_tampered_token_is_invalid(tokens):
    header, payload, signature = tokens.issue(BOB).split(".")
    forged = jwt.encode({"user_id": 1, "username": "admin"}, "guess", algorithm=ALGORITHM).split(".")[1]

    with pytest.raises(TokenInvalid):
        tokens.verify(".".join([header, forged, signature]))


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_garbage_is_invalid(tokens, token):
    with pytest.raises(TokenInvalid):
        tokens.verify(token)


def test_token_without_identity_claims_is_invalid(tokens):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"iat": int(now.timestamp()), "exp": int((now + timedelta(hours=1)).timestamp())},
        SECRET,
        algorithm=ALGORITHM,
    )

    with pytest.raises(TokenInvalid):
        tokens.verify(token)


def test_token_without_expiry_is_invalid(tokens):
    token = jwt.encode({"user_id": 7, "username": "bob", "iat": 0}, SECRET, algorithm=ALGORITHM)

    with pytest.raises(TokenInvalid):
        tokens.verify(token)
