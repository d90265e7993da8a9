"""Error types shared by the repositories, security helpers and the session service."""


class MyBankError(Exception):
    """Base error carrying a client-safe message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class PasswordValidationError(MyBankError):
    """Raised when a password fails the minimum length rule."""


class InvalidCredentialsError(MyBankError):
    """Raised on login failure; unknown email and wrong password look the same."""


class DuplicateEmailError(MyBankError):
    """Raised when the database rejects an account because its email exists."""


class UnauthorizedError(MyBankError):
    """Raised when no session token is presented or the token has expired."""


class ForbiddenError(MyBankError):
    """Raised when a presented session token is forged, corrupted or malformed."""


class AccountNotFoundError(MyBankError):
    """Raised when the account referenced by a session no longer exists."""


class StorageError(MyBankError):
    """Raised for any persistence failure (constraint, connection, pool timeout)."""


class ServerError(MyBankError):
    """Raised for unexpected internal failures."""


class PasswordHashError(ServerError):
    """Raised when a stored password hash is structurally malformed."""


class TokenExpiredError(MyBankError):
    """Raised when a correctly signed session token is past its expiry."""


class TokenInvalidError(MyBankError):
    """Raised when a session token fails signature or payload checks."""
