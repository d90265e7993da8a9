"""Request/response schemas for account and session endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class SessionClaims(BaseModel):
    """Identity claims carried inside a session token."""

    model_config = ConfigDict(frozen=True)

    username: str
    role: str


class RegisterRequest(BaseModel):
    """New account details. Password length is checked by the session service (400, not 422)."""

    username: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., min_length=3, max_length=255, description="Login email (unique)")
    password: str = Field(..., description="Password, at least 10 characters")
    phone: str | None = Field(default=None, max_length=20, description="Free-form phone number")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., max_length=255, description="Login email")
    password: str = Field(..., description="Password")


class ChangePasswordRequest(BaseModel):
    """New password for the account identified by the session cookie."""

    model_config = ConfigDict(populate_by_name=True)

    new_password: str = Field(..., alias="newPassword")


class MessageResponse(BaseModel):
    """Human-readable outcome plus an optional page to navigate to."""

    message: str
    redirect: str | None = None


class NextUidResponse(BaseModel):
    """Advisory next account id, for display only."""

    model_config = ConfigDict(populate_by_name=True)

    next_uid: int = Field(..., alias="nextUid")


class ProfileResponse(BaseModel):
    """Balance and profile fields of the logged-in account (never the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    balance: float
    username: str
    email: str
    phone: str | None = None
    role: str
