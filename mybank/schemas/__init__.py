"""Pydantic request/response schemas."""

from mybank.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    NextUidResponse,
    ProfileResponse,
    RegisterRequest,
    SessionClaims,
)
from mybank.schemas.health import HealthResponse

__all__ = [
    "ChangePasswordRequest",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "NextUidResponse",
    "ProfileResponse",
    "RegisterRequest",
    "SessionClaims",
]
