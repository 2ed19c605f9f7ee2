"""Unit tests for auth service: bcrypt hashing and token issue/verify."""
from datetime import datetime, timedelta, timezone

import bcrypt
import pytest
from jose import jwt

from gradestats.services.auth import (
    InvalidToken,
    TokenPayload,
    TokenService,
    burn_password_check,
    hash_password,
    verify_password,
)


def test_hash_password_is_salted_and_not_plaintext():
    h1 = hash_password("secret", rounds=4)
    h2 = hash_password("secret", rounds=4)
    assert h1 != "secret"
    assert h1 != h2
    assert h1.startswith("$2")


def test_hash_password_default_cost_is_10():
    h = hash_password("secret")
    assert h.split("$")[2] == "10"


def test_hash_password_none_raises():
    with pytest.raises(ValueError):
        hash_password(None)


def test_verify_password_match_and_mismatch():
    h = hash_password("p1", rounds=4)
    assert verify_password("p1", h) is True
    assert verify_password("wrong", h) is False
    assert verify_password("", h) is False


def test_verify_password_malformed_hash_returns_false():
    assert verify_password("p1", "not-a-bcrypt-hash") is False


def test_verify_password_long_password_truncated_consistently():
    long_pw = "x" * 100
    h = hash_password(long_pw, rounds=4)
    assert verify_password(long_pw, h) is True


def test_verify_password_distinguishes_72nd_byte():
    stored = hash_password("a" * 71 + "X", rounds=4)
    assert verify_password("a" * 71 + "X", stored) is True
    assert verify_password("a" * 71 + "Y", stored) is False


def test_verify_password_ignores_bytes_past_72():
    stored = hash_password("b" * 72 + "tail-one", rounds=4)
    assert verify_password("b" * 72 + "tail-two", stored) is True
    assert verify_password("b" * 72, stored) is True
    assert verify_password("b" * 71, stored) is False


def test_hash_matches_raw_bcrypt_at_boundary():
    pw = "c" * 72
    stored = hash_password(pw, rounds=4)
    assert bcrypt.checkpw(pw.encode("utf-8"), stored.encode("utf-8"))


def test_burn_password_check_always_false():
    assert burn_password_check("anything", rounds=4) is False


def test_token_roundtrip_carries_id_and_role():
    tokens = TokenService("s3cret")
    token = tokens.issue(7, "admin")
    assert tokens.verify(token) == TokenPayload(id=7, role="admin")


def test_token_payload_has_only_id_role_and_times():
    tokens = TokenService("s3cret")
    claims = jwt.decode(tokens.issue(1, "user"), "s3cret", algorithms=["HS256"])
    assert set(claims) == {"id", "role", "iat", "exp"}
    assert claims["exp"] - claims["iat"] == 3600


def test_token_valid_just_before_one_hour():
    tokens = TokenService("s3cret")
    issued = datetime.now(timezone.utc) - timedelta(minutes=59)
    assert tokens.verify(tokens.issue(1, "user", now=issued)).id == 1


def test_token_expired_after_one_hour():
    tokens = TokenService("s3cret")
    issued = datetime.now(timezone.utc) - timedelta(minutes=61)
    with pytest.raises(InvalidToken):
        tokens.verify(tokens.issue(1, "user", now=issued))


def test_token_wrong_secret_rejected():
    token = TokenService("one").issue(1, "user")
    with pytest.raises(InvalidToken):
        TokenService("two").verify(token)


def test_token_tampered_rejected():
    tokens = TokenService("s3cret")
    token = tokens.issue(1, "user")
    head, body, sig = token.split(".")
    forged = jwt.encode({"id": 2, "role": "admin", "exp": 9999999999}, "other", algorithm="HS256").split(".")[1]
    with pytest.raises(InvalidToken):
        tokens.verify(".".join([head, forged, sig]))


def test_token_malformed_rejected():
    tokens = TokenService("s3cret")
    with pytest.raises(InvalidToken):
        tokens.verify("not.a.token")
    with pytest.raises(InvalidToken):
        tokens.verify("garbage")


def test_token_without_id_rejected():
    token = jwt.encode({"role": "user", "exp": 9999999999}, "s3cret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        TokenService("s3cret").verify(token)


def test_token_service_requires_secret():
    with pytest.raises(ValueError):
        TokenService("")
