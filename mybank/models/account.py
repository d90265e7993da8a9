"""ORM model for bank accounts (login identity plus balance)."""

from sqlalchemy import Column, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from mybank.models.base import Base

DEFAULT_ROLE = "Customer"


class Account(Base):
    """
    Customer account.

    email is the only unique column and the login identifier; username is a
    display name and may repeat. balance is set once at registration.
    """

    __tablename__ = "accounts"
    __table_args__ = (UniqueConstraint("email", name="uq_accounts_email"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    balance = Column(Numeric(15, 2), nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(String(50), nullable=False, default=DEFAULT_ROLE, server_default=DEFAULT_ROLE)

    session_tokens = relationship(
        "SessionToken",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
