"""Shared FastAPI dependencies: process-wide security objects and the per-request session service."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from mybank.core.config import get_settings
from mybank.core.database import get_db
from mybank.core.errors import (
    AccountNotFoundError,
    DuplicateEmailError,
    ForbiddenError,
    InvalidCredentialsError,
    MyBankError,
    PasswordValidationError,
    UnauthorizedError,
)
from mybank.core.security import PasswordHasher, TokenConfig, TokenIssuer, TokenVerifier
from mybank.repositories import AccountRepository, SessionTokenRepository
from mybank.services.auth_session import AuthSessionService

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "auth_token"

_STATUS_BY_ERROR: dict[type[MyBankError], int] = {
    PasswordValidationError: status.HTTP_400_BAD_REQUEST,
    DuplicateEmailError: status.HTTP_400_BAD_REQUEST,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    AccountNotFoundError: status.HTTP_404_NOT_FOUND,
}


@lru_cache
def get_token_config() -> TokenConfig:
    """Signing configuration, built once from settings at first use."""
    return TokenConfig.from_settings(get_settings())


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_settings().BCRYPT_ROUNDS)


def get_token_issuer(
    config: Annotated[TokenConfig, Depends(get_token_config)],
) -> TokenIssuer:
    return TokenIssuer(config)


def get_token_verifier(
    config: Annotated[TokenConfig, Depends(get_token_config)],
) -> TokenVerifier:
    return TokenVerifier(config)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthSessionService:
    """Dependency: session service bound to this request's DB session."""
    return AuthSessionService(
        accounts=AccountRepository(db),
        token_audit=SessionTokenRepository(db),
        hasher=hasher,
        issuer=issuer,
        verifier=verifier,
    )


def to_http_exception(error: MyBankError) -> HTTPException:
    """
    Map a service error to its HTTP status.

    Storage and server errors become 500 with their generic message; the
    backend detail has already been logged where it happened.
    """
    status_code = _STATUS_BY_ERROR.get(type(error))
    if status_code is None:
        logger.error("Request failed: %s (%s)", error.message, type(error).__name__)
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=error.message or "Server error",
        )
    return HTTPException(status_code=status_code, detail=error.message)
