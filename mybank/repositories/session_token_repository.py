"""Append-only audit trail of issued session tokens."""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mybank.core.errors import StorageError
from mybank.models import SessionToken

logger = logging.getLogger(__name__)


class SessionTokenRepository:
    """Records tokens at login. Nothing here is read back during verification."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def record(self, token_value: str, account_id: int, expires_at: datetime) -> SessionToken:
        """Insert one audit row. Raises StorageError on failure."""
        row = SessionToken(token_value=token_value, account_id=account_id, expires_at=expires_at)
        self._session.add(row)
        try:
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error("Session token audit insert failed: %s", e, exc_info=e)
            raise StorageError("Database error.") from e
        return row
