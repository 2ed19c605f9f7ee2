"""
Auth service: password hashing and JWT creation/verification.
Uses bcrypt directly (no passlib) to avoid passlib/bcrypt version conflicts.
Token payload is {id, role} plus iat/exp; there is no refresh, an expired token means log in again.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
import bcrypt
from jose import JWTError, jwt

# bcrypt keys on the first 72 bytes; anything past that is ignored
BCRYPT_MAX_BYTES = 72
BCRYPT_ROUNDS = 10


class InvalidToken(Exception):
    """Token is malformed, has a bad signature, is expired, or lacks a user id."""


def _truncate_to_bytes(s: str, max_bytes: int = BCRYPT_MAX_BYTES) -> bytes:
    """Truncate string to at most max_bytes UTF-8; return bytes for bcrypt."""
    if not s:
        return b""
    encoded = s.encode("utf-8")
    if len(encoded) <= max_bytes:
        return encoded
    return encoded[:max_bytes]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash password for storage. Raises ValueError if password is None."""
    if password is None:
        raise ValueError("password is required")
    raw = _truncate_to_bytes(password)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(raw, salt)
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    raw = _truncate_to_bytes(plain)
    try:
        return bcrypt.checkpw(raw, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        # malformed or missing stored hash
        return False


@lru_cache
def _dummy_hash(rounds: int) -> str:
    return hash_password("dummy-password-for-timing", rounds=rounds)


def burn_password_check(plain: str, rounds: int = BCRYPT_ROUNDS) -> bool:
    """Run a full bcrypt check against a fixed hash so unknown emails cost the same as wrong passwords."""
    verify_password(plain, _dummy_hash(rounds))
    return False


@dataclass(frozen=True)
class TokenPayload:
    id: int
    role: str


class TokenService:
    """Signs and verifies access tokens with one process-wide secret."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings) -> "TokenService":
        return cls(settings.secret_key, settings.jwt_algorithm, settings.jwt_expire_minutes)

    def issue(self, user_id: int, role: str, now: datetime | None = None) -> str:
        issued = now or datetime.now(timezone.utc)
        expire = issued + timedelta(minutes=self.expire_minutes)
        # JWT exp must be numeric (Unix timestamp), not datetime
        payload = {"id": user_id, "role": role, "iat": int(issued.timestamp()), "exp": int(expire.timestamp())}
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenPayload:
        """Decode token; raise InvalidToken on any failure (expired included)."""
        try:
            claims = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as e:
            raise InvalidToken(str(e)) from e
        user_id = claims.get("id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise InvalidToken("token payload has no user id")
        return TokenPayload(id=user_id, role=str(claims.get("role") or "user"))
