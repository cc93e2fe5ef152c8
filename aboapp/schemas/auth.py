"""
AboApp Backend — Auth Schemas
===============================

What:  Request/response models for one-time-code sign-in.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


@dataclass(frozen=True)
class UserContext:
    """
    The signed-in identity for one request.

    Resolved from the bearer token at the start of each request and passed
    explicitly into every service call that needs an owner.
    """
    user_id: uuid.UUID
    email: Optional[str]
    access_token: str


class SendCodeRequest(BaseModel):
    email: EmailStr


class VerifyCodeRequest(BaseModel):
    email: EmailStr
    code: str = Field(min_length=1, max_length=20, description="Code from the sign-in email")


class SessionResponse(BaseModel):
    """Returned after a successful code verification."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    user_id: uuid.UUID
    email: Optional[str] = None


class UserResponse(BaseModel):
    user_id: uuid.UUID
    email: Optional[str] = None


class MessageResponse(BaseModel):
    message: str
