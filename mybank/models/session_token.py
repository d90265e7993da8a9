"""ORM model for the session token audit trail."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from mybank.models.base import Base


class SessionToken(Base):
    """
    One row per successful login. Append-only; never consulted when a token
    is verified. Rows go away only with their account (ON DELETE CASCADE).
    """

    __tablename__ = "session_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    token_value = Column(Text, nullable=False)
    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False)

    account = relationship("Account", back_populates="session_tokens")
