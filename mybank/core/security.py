"""Password hashing and session token issuing/verification."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from jwt.utils import base64url_decode, base64url_encode
from pydantic import BaseModel, ConfigDict, SecretStr

from mybank.core.config import Settings
from mybank.core.errors import PasswordHashError, TokenExpiredError, TokenInvalidError
from mybank.schemas.auth import SessionClaims

# Bcrypt cost (log2 rounds) when none is configured.
DEFAULT_BCRYPT_ROUNDS = 10

# Minimum plaintext length, enforced by the session service on register and change.
PASSWORD_MIN_LEN = 10

# bcrypt only reads the first 72 bytes of input.
BCRYPT_MAX_BYTES = 72

# One message for every non-expiry failure so callers cannot tell signature from shape.
INVALID_TOKEN_MESSAGE = "Invalid Token"
EXPIRED_TOKEN_MESSAGE = "Session expired"


class PasswordHasher:
    """Salted one-way hashing with bcrypt."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Length is not re-validated here."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """
        Verify a plain password against a stored hash.

        Returns False on mismatch. Raises PasswordHashError if the stored hash
        is not a bcrypt digest (corrupted row).
        """
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError) as e:
            raise PasswordHashError("Stored password hash is malformed.") from e


class TokenConfig(BaseModel):
    """Immutable signing configuration handed to TokenIssuer and TokenVerifier."""

    model_config = ConfigDict(frozen=True)

    secret: SecretStr
    algorithm: str = "HS256"
    ttl: timedelta = timedelta(hours=1)

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenConfig":
        return cls(
            secret=config.JWT_SECRET,
            algorithm=config.JWT_ALGORITHM,
            ttl=timedelta(minutes=config.SESSION_TTL_MINUTES),
        )


@dataclass(frozen=True)
class IssuedToken:
    """A signed session token and the instants it covers."""

    token_value: str
    issued_at: datetime
    expires_at: datetime


class TokenIssuer:
    """Signs session tokens carrying username, role and exp."""

    def __init__(self, config: TokenConfig) -> None:
        self._config = config

    @property
    def ttl(self) -> timedelta:
        return self._config.ttl

    def issue(
        self,
        claims: SessionClaims,
        ttl: timedelta | None = None,
        now: datetime | None = None,
    ) -> IssuedToken:
        """Create a JWT for claims expiring at now + ttl (default: configured lifetime)."""
        # JWT NumericDate has second precision; keep expires_at equal to the exp claim.
        issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
        expires_at = issued_at + (ttl if ttl is not None else self._config.ttl)
        payload: dict[str, Any] = {
            "username": claims.username,
            "role": claims.role,
            "exp": expires_at,
        }
        token = jwt.encode(
            payload,
            self._config.secret.get_secret_value(),
            algorithm=self._config.algorithm,
        )
        return IssuedToken(token_value=token, issued_at=issued_at, expires_at=expires_at)


class TokenVerifier:
    """Checks a session token's signature, then its expiry."""

    def __init__(self, config: TokenConfig) -> None:
        self._config = config

    def verify(self, token_value: str, now: datetime | None = None) -> SessionClaims:
        """
        Return the token's claims.

        Raises TokenInvalidError for any signature, encoding or payload problem
        and TokenExpiredError only for a well-formed, correctly signed token
        whose exp has passed.
        """
        try:
            _require_canonical_signature(token_value)
            payload = jwt.decode(
                token_value,
                self._config.secret.get_secret_value(),
                algorithms=[self._config.algorithm],
                options={"verify_exp": False, "require": ["exp", "username", "role"]},
            )
        except (jwt.PyJWTError, ValueError) as e:
            raise TokenInvalidError(INVALID_TOKEN_MESSAGE) from e

        exp = payload.get("exp")
        username = payload.get("username")
        role = payload.get("role")
        if (
            isinstance(exp, bool)
            or not isinstance(exp, (int, float))
            or not isinstance(username, str)
            or not username
            or not isinstance(role, str)
        ):
            raise TokenInvalidError(INVALID_TOKEN_MESSAGE)

        current = now or datetime.now(UTC)
        if current.timestamp() >= exp:
            raise TokenExpiredError(EXPIRED_TOKEN_MESSAGE)
        return SessionClaims(username=username, role=role)


def _require_canonical_signature(token_value: str) -> None:
    """
    Reject signature segments that only decode to the right bytes.

    The last base64url character of a signature carries unused bits, so two
    different strings can decode to the same MAC.
    """
    parts = token_value.split(".")
    if len(parts) != 3:
        raise ValueError("token must have three segments")
    signature = parts[2]
    if base64url_encode(base64url_decode(signature)).decode("ascii") != signature:
        raise ValueError("non-canonical signature encoding")
