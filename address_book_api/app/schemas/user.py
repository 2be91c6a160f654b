"""
Pydantic models for registration, login and password recovery.

Passwords only ever travel inbound; no response schema exposes them
or their hashes.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRegister(BaseModel):
    """Payload for ``POST /register``."""

    name: str = Field(..., min_length=1, examples=["Jane Doe"])
    email: EmailStr = Field(..., examples=["jane@example.com"])
    password: str = Field(..., min_length=1, examples=["strongpassword"])


class UserLogin(BaseModel):
    # Plain ``str`` here: a malformed email is just another failed login.
    email: str = Field(..., examples=["jane@example.com"])
    password: str = Field(..., examples=["strongpassword"])


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., examples=["jane@example.com"])


class ResetPasswordRequest(BaseModel):
    """Payload for ``POST /reset-password``.

    Clients send ``newPassword``; ``new_password`` is accepted too.
    """

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1, alias="newPassword")


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str
