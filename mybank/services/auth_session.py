"""Registration, login and session-authenticated account operations."""

import logging
import random
from decimal import Decimal

from mybank.core.errors import (
    AccountNotFoundError,
    ForbiddenError,
    InvalidCredentialsError,
    PasswordValidationError,
    StorageError,
    TokenExpiredError,
    TokenInvalidError,
    UnauthorizedError,
)
from mybank.core.security import (
    PASSWORD_MIN_LEN,
    IssuedToken,
    PasswordHasher,
    TokenIssuer,
    TokenVerifier,
)
from mybank.models import Account
from mybank.repositories import AccountRepository, SessionTokenRepository
from mybank.schemas.auth import SessionClaims

logger = logging.getLogger(__name__)

# Opening balance range, whole units: [min, max).
INITIAL_BALANCE_MIN = 100_000
INITIAL_BALANCE_MAX = 1_000_000

# Pages the browser client is sent to after each step.
LOGIN_PAGE = "/index.html"
DASHBOARD_PAGE = "/dashboard.html"

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
SHORT_PASSWORD_MESSAGE = f"Password must be at least {PASSWORD_MIN_LEN} characters."


class AuthSessionService:
    """
    Orchestrates hashing, account storage, token issuing and the token audit trail.

    Logout has no server side: issued tokens stay valid until they expire,
    including after a password change.
    """

    def __init__(
        self,
        accounts: AccountRepository,
        token_audit: SessionTokenRepository,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        verifier: TokenVerifier,
        rng: random.Random | None = None,
    ) -> None:
        self.accounts = accounts
        self.token_audit = token_audit
        self.hasher = hasher
        self.issuer = issuer
        self.verifier = verifier
        self._rng = rng or random.SystemRandom()

    def next_identifier_hint(self) -> int:
        return self.accounts.next_identifier_hint()

    def register(
        self,
        username: str,
        email: str,
        password: str,
        phone: str | None = None,
    ) -> Account:
        """
        Create an account with a random opening balance.

        Raises PasswordValidationError for a short password and
        DuplicateEmailError when the email is already registered.
        """
        _validate_password(password)
        password_hash = self.hasher.hash(password)
        balance = Decimal(self._rng.randrange(INITIAL_BALANCE_MIN, INITIAL_BALANCE_MAX))
        return self.accounts.create(
            username=username,
            email=email,
            password_hash=password_hash,
            balance=balance,
            phone=phone,
        )

    def login(self, email: str, password: str) -> IssuedToken:
        """Check credentials and issue a session token; the audit write is best-effort."""
        account = self.accounts.find_by_email(email)
        if account is None:
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)
        if not self.hasher.verify(password, account.password_hash):
            raise InvalidCredentialsError(INVALID_CREDENTIALS_MESSAGE)

        issued = self.issuer.issue(SessionClaims(username=account.username, role=account.role))
        try:
            self.token_audit.record(issued.token_value, account.id, issued.expires_at)
        except StorageError:
            logger.warning(
                "Session token issued without audit record",
                extra={"account_id": account.id, "expires_at": issued.expires_at.isoformat()},
            )
        return issued

    def authenticate(self, token_value: str | None) -> SessionClaims:
        """Map a presented token to its claims, or raise UnauthorizedError / ForbiddenError."""
        if not token_value:
            raise UnauthorizedError("Unauthorized")
        try:
            return self.verifier.verify(token_value)
        except TokenExpiredError as e:
            raise UnauthorizedError(e.message) from e
        except TokenInvalidError as e:
            raise ForbiddenError(e.message) from e

    def fetch_profile(self, token_value: str | None) -> Account:
        """Return the account named by a valid session token."""
        claims = self.authenticate(token_value)
        account = self.accounts.find_by_username(claims.username)
        if account is None:
            raise AccountNotFoundError("User not found")
        return account

    def change_password(self, token_value: str | None, new_password: str) -> None:
        """Replace the password of the session's account. Existing tokens are not revoked."""
        claims = self.authenticate(token_value)
        _validate_password(new_password)
        self.accounts.update_password(claims.username, self.hasher.hash(new_password))

    def logout(self) -> str:
        """Nothing to do server-side; returns the page to send the client to."""
        return LOGIN_PAGE


def _validate_password(password: str) -> None:
    if len(password) < PASSWORD_MIN_LEN:
        raise PasswordValidationError(SHORT_PASSWORD_MESSAGE)
