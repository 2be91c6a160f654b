"""
Authentication endpoints.

Registration, login, password recovery and a sample route that
requires a bearer token.  Failures are raised by ``AuthService`` as
``AddressBookError`` subclasses and rendered by the handler installed
in ``main.create_app``.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ...core.security import get_current_user
from ...schemas.user import (
    ForgotPasswordRequest,
    MessageResponse,
    ResetPasswordRequest,
    TokenResponse,
    UserLogin,
    UserRegister,
)
from ...services.auth_service import AuthService
from ..deps import get_auth_service


router = APIRouter()


@router.post("/register", response_model=MessageResponse)
def register(user: UserRegister, auth: AuthService = Depends(get_auth_service)) -> MessageResponse:
    """Register a new user.  The password is stored as a bcrypt hash."""
    return MessageResponse(message=auth.register(user.name, user.email, user.password))


@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, auth: AuthService = Depends(get_auth_service)) -> TokenResponse:
    """Exchange email and password for a bearer token valid for one hour.

    Answers 401 ``{"message": "Invalid credentials"}`` when the email is
    unknown or the password does not match.
    """
    return TokenResponse(token=auth.login(credentials.email, credentials.password))


@router.post("/forgot-password", response_class=PlainTextResponse)
def forgot_password(
    request: ForgotPasswordRequest, auth: AuthService = Depends(get_auth_service)
) -> str:
    """Email a one hour password reset token to the user."""
    auth.forgot_password(request.email)
    return "Password reset email sent."


@router.post("/reset-password", response_class=PlainTextResponse)
def reset_password(
    request: ResetPasswordRequest, auth: AuthService = Depends(get_auth_service)
) -> str:
    auth.reset_password(request.token, request.new_password)
    return "Password reset successfully."


@router.get("/protected-data", response_model=MessageResponse)
def protected_data(current_user: Dict[str, Any] = Depends(get_current_user)) -> MessageResponse:
    return MessageResponse(message="This is a secure API!")
