"""Account storage. The database's unique index on email decides duplicates."""

import logging
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from mybank.core.errors import AccountNotFoundError, DuplicateEmailError, StorageError
from mybank.models import DEFAULT_ROLE, Account

logger = logging.getLogger(__name__)

STORAGE_ERROR_MESSAGE = "Database error."
DUPLICATE_EMAIL_MESSAGE = "Email already exists."
ACCOUNT_NOT_FOUND_MESSAGE = "User not found"


class AccountRepository:
    """Create, look up and update accounts. Raises StorageError instead of SQLAlchemy errors."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def next_identifier_hint(self) -> int:
        """
        Return MAX(id) + 1, or 1 when there are no accounts.

        Advisory only: a concurrent registration can take this id first, and
        the value is never used as a key.
        """
        try:
            max_id = self._session.query(func.max(Account.id)).scalar()
        except SQLAlchemyError as e:
            raise self._storage_error("next_identifier_hint", e) from e
        return (max_id or 0) + 1

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        balance: Decimal,
        phone: str | None,
        role: str = DEFAULT_ROLE,
    ) -> Account:
        """Insert an account and return it with its database-assigned id."""
        account = Account(
            username=username,
            email=email,
            password_hash=password_hash,
            balance=balance,
            phone=phone,
            role=role,
        )
        self._session.add(account)
        try:
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            if self._email_exists(email):
                logger.info("Registration rejected by unique email constraint")
                raise DuplicateEmailError(DUPLICATE_EMAIL_MESSAGE) from e
            raise self._storage_error("create", e) from e
        except SQLAlchemyError as e:
            raise self._storage_error("create", e) from e
        self._session.refresh(account)
        logger.info("Account created", extra={"account_id": account.id})
        return account

    def find_by_email(self, email: str) -> Account | None:
        try:
            return self._session.query(Account).filter(Account.email == email).first()
        except SQLAlchemyError as e:
            raise self._storage_error("find_by_email", e) from e

    def find_by_username(self, username: str) -> Account | None:
        """Usernames may repeat; the lowest id wins."""
        try:
            return (
                self._session.query(Account)
                .filter(Account.username == username)
                .order_by(Account.id)
                .first()
            )
        except SQLAlchemyError as e:
            raise self._storage_error("find_by_username", e) from e

    def update_password(self, username: str, new_password_hash: str) -> None:
        """Overwrite the stored hash (last writer wins)."""
        account = self.find_by_username(username)
        if account is None:
            raise AccountNotFoundError(ACCOUNT_NOT_FOUND_MESSAGE)
        account.password_hash = new_password_hash
        try:
            self._session.commit()
        except SQLAlchemyError as e:
            raise self._storage_error("update_password", e) from e
        logger.info("Password updated", extra={"account_id": account.id})

    def _email_exists(self, email: str) -> bool:
        try:
            return self._session.query(Account.id).filter(Account.email == email).first() is not None
        except SQLAlchemyError as e:
            raise self._storage_error("create", e) from e

    def _storage_error(self, operation: str, error: SQLAlchemyError) -> StorageError:
        """Roll back, log the backend error in full, and return a generic StorageError."""
        try:
            self._session.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed after %s error", operation)
        logger.error(
            "Account storage failure in %s: %s",
            operation,
            error,
            exc_info=error,
        )
        return StorageError(STORAGE_ERROR_MESSAGE)
