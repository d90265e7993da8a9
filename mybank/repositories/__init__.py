"""Persistence repositories over SQLAlchemy sessions."""

from mybank.repositories.account_repository import AccountRepository
from mybank.repositories.session_token_repository import SessionTokenRepository

__all__ = ["AccountRepository", "SessionTokenRepository"]
