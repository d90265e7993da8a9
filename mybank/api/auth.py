"""Registration, login and logout endpoints. Login sets the auth_token cookie."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from mybank.api.deps import AUTH_COOKIE_NAME, get_auth_service, to_http_exception
from mybank.core.config import Settings, get_settings
from mybank.core.errors import MyBankError
from mybank.schemas.auth import LoginRequest, MessageResponse, NextUidResponse, RegisterRequest
from mybank.services.auth_session import DASHBOARD_PAGE, LOGIN_PAGE, AuthSessionService

router = APIRouter()


@router.get("/next-uid", response_model=NextUidResponse)
def get_next_uid(
    service: Annotated[AuthSessionService, Depends(get_auth_service)],
) -> NextUidResponse:
    """Advisory next account id for the registration page. Not reserved."""
    try:
        next_uid = service.next_identifier_hint()
    except MyBankError as e:
        raise to_http_exception(e) from e
    return NextUidResponse(next_uid=next_uid)


@router.post("/register", response_model=MessageResponse)
def register(
    body: RegisterRequest,
    service: Annotated[AuthSessionService, Depends(get_auth_service)],
) -> MessageResponse:
    """Create an account. 400 for a short password or an email that is already registered."""
    try:
        service.register(
            username=body.username,
            email=body.email,
            password=body.password,
            phone=body.phone,
        )
    except MyBankError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Registration successful", redirect=LOGIN_PAGE)


@router.post("/login", response_model=MessageResponse)
def login(
    body: LoginRequest,
    response: Response,
    service: Annotated[AuthSessionService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> MessageResponse:
    """
    Authenticate with email and password.
    On success the session token is set as an HttpOnly cookie that expires with the token.
    """
    try:
        issued = service.login(body.email, body.password)
    except MyBankError as e:
        raise to_http_exception(e) from e
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=issued.token_value,
        max_age=int((issued.expires_at - issued.issued_at).total_seconds()),
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    return MessageResponse(message="Login successful", redirect=DASHBOARD_PAGE)


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    service: Annotated[AuthSessionService, Depends(get_auth_service)],
) -> MessageResponse:
    """Clear the session cookie. The token itself stays valid until it expires."""
    redirect = service.logout()
    response.delete_cookie(key=AUTH_COOKIE_NAME, httponly=True, samesite="lax")
    return MessageResponse(message="Logged out", redirect=redirect)
