"""Cookie-authenticated account endpoints: balance/profile and password change."""

from typing import Annotated

from fastapi import APIRouter, Cookie, Depends

from mybank.api.deps import AUTH_COOKIE_NAME, get_auth_service, to_http_exception
from mybank.core.errors import MyBankError
from mybank.schemas.auth import ChangePasswordRequest, MessageResponse, ProfileResponse
from mybank.services.auth_session import AuthSessionService

router = APIRouter()


@router.get("/balance", response_model=ProfileResponse)
def get_balance(
    service: Annotated[AuthSessionService, Depends(get_auth_service)],
    auth_token: Annotated[str | None, Cookie(alias=AUTH_COOKIE_NAME)] = None,
) -> ProfileResponse:
    """
    Return balance and profile of the logged-in account.
    401 without a cookie or with an expired session, 403 for a bad token, 404 if the account is gone.
    """
    try:
        account = service.fetch_profile(auth_token)
    except MyBankError as e:
        raise to_http_exception(e) from e
    return ProfileResponse(
        balance=float(account.balance),
        username=account.username,
        email=account.email,
        phone=account.phone,
        role=account.role,
    )


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    service: Annotated[AuthSessionService, Depends(get_auth_service)],
    auth_token: Annotated[str | None, Cookie(alias=AUTH_COOKIE_NAME)] = None,
) -> MessageResponse:
    """Set a new password (at least 10 characters). Existing sessions are not revoked."""
    try:
        service.change_password(auth_token, body.new_password)
    except MyBankError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Password updated successfully")
