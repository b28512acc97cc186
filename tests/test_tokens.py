"""Token codec tests.

Learn: These run against a TokenCodec with a fixed secret and an explicit
clock, so expiry is tested exactly at the boundary without sleeping.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from quizhub.auth.identity import Identity, Role
from quizhub.auth.tokens import TokenCodec
from quizhub.errors import INVALID_TOKEN_MESSAGE, InvalidToken

SECRET = "unit-test-secret"
TTL = 3600
T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture()
def codec():
    return TokenCodec(secret=SECRET, ttl_seconds=TTL)


def _flip(text: str, index: int) -> str:
    replacement = "A" if text[index] != "A" else "B"
    return text[:index] + replacement + text[index + 1:]


# ─── Round trip ─────────────────────────────────────────


def test_issue_then_verify_returns_identity(codec):
    token = codec.issue("ada@example.com", Role.OWNER, now=T0)
    identity = codec.verify(token, now=T0 + timedelta(seconds=10))
    assert identity == Identity(subject="ada@example.com", role=Role.OWNER)


def test_claims_are_flat_and_carry_lifetime(codec):
    token = codec.issue("bo@example.com", Role.TAKER, now=T0)
    claims = jwt.decode(
        token,
        SECRET,
        algorithms=["HS256"],
        options={"verify_exp": False, "verify_iat": False},
    )
    assert claims["sub"] == "bo@example.com"
    assert claims["role"] == "TAKER"
    assert claims["exp"] - claims["iat"] == TTL


# ─── Expiry ─────────────────────────────────────────────


def test_valid_until_the_last_second(codec):
    token = codec.issue("ada@example.com", Role.TAKER, now=T0)
    assert codec.verify(token, now=T0 + timedelta(seconds=TTL - 1)).subject == "ada@example.com"


def test_expired_at_exp(codec):
    token = codec.issue("ada@example.com", Role.TAKER, now=T0)
    with pytest.raises(InvalidToken):
        codec.verify(token, now=T0 + timedelta(seconds=TTL))


def test_expired_after_ttl(codec):
    token = codec.issue("ada@example.com", Role.TAKER, now=T0)
    with pytest.raises(InvalidToken):
        codec.verify(token, now=T0 + timedelta(seconds=TTL + 1))


# ─── Tampering ──────────────────────────────────────────


def test_any_payload_change_is_rejected(codec):
    token = codec.issue("ada@example.com", Role.TAKER, now=T0)
    header, payload, signature = token.split(".")
    for i in range(len(payload)):
        tampered = ".".join([header, _flip(payload, i), signature])
        with pytest.raises(InvalidToken):
            codec.verify(tampered, now=T0)


def test_signature_change_is_rejected(codec):
    token = codec.issue("ada@example.com", Role.TAKER, now=T0)
    header, payload, signature = token.split(".")
    for i in range(len(signature)):
        tampered = ".".join([header, payload, _flip(signature, i)])
        with pytest.raises(InvalidToken):
            codec.verify(tampered, now=T0)


def test_role_escalation_with_other_key_is_rejected(codec):
    forged = jwt.encode(
        {"sub": "ada@example.com", "role": "OWNER", "iat": 0, "exp": 2**40},
        "someone-elses-secret",
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken):
        codec.verify(forged, now=T0)


def test_wrong_secret_is_rejected(codec):
    other = TokenCodec(secret="another-secret", ttl_seconds=TTL)
    token = other.issue("ada@example.com", Role.OWNER, now=T0)
    with pytest.raises(InvalidToken):
        codec.verify(token, now=T0)


def test_unsigned_token_is_rejected(codec):
    unsigned = jwt.encode(
        {"sub": "ada@example.com", "role": "OWNER", "iat": 0, "exp": 2**40},
        None,
        algorithm="none",
    )
    with pytest.raises(InvalidToken):
        codec.verify(unsigned, now=T0)


# ─── Malformed claims ───────────────────────────────────


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c", "not a token at all", "...."])
def test_garbage_is_rejected(codec, garbage):
    with pytest.raises(InvalidToken):
        codec.verify(garbage, now=T0)


def test_unknown_role_is_rejected(codec):
    token = jwt.encode(
        {"sub": "ada@example.com", "role": "ADMIN", "iat": 0, "exp": 2**40},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken):
        codec.verify(token, now=T0)


@pytest.mark.parametrize("missing", ["sub", "role", "iat", "exp"])
def test_missing_claim_is_rejected(codec, missing):
    claims = {"sub": "ada@example.com", "role": "TAKER", "iat": 0, "exp": 2**40}
    del claims[missing]
    token = jwt.encode(claims, SECRET, algorithm="HS256")
    with pytest.raises(InvalidToken):
        codec.verify(token, now=T0)


def test_empty_subject_is_rejected(codec):
    token = jwt.encode(
        {"sub": "", "role": "TAKER", "iat": 0, "exp": 2**40}, SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidToken):
        codec.verify(token, now=T0)


def test_every_failure_has_the_same_message(codec):
    expired = codec.issue("ada@example.com", Role.TAKER, now=T0 - timedelta(days=2))
    messages = set()
    for bad in [expired, "garbage", expired[:-5] + "AAAAA"]:
        with pytest.raises(InvalidToken) as exc_info:
            codec.verify(bad, now=T0)
        messages.add(exc_info.value.message)
    assert messages == {INVALID_TOKEN_MESSAGE}
