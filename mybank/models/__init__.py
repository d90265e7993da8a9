"""SQLAlchemy ORM models."""

from mybank.models.account import DEFAULT_ROLE, Account
from mybank.models.base import Base
from mybank.models.session_token import SessionToken

__all__ = ["Account", "Base", "DEFAULT_ROLE", "SessionToken"]
