"""
AboApp Backend — Sign-in Route Handlers
=========================================

What:  Email one-time-code sign-in: request a code, verify it, sign out.
How:   Thin wrappers over the auth provider. Provider refusals surface as
       AuthProviderError and are rendered by the global handler with the
       provider's own message (e.g. "Token has expired or is invalid").

Flow:
    POST /api/auth/code    {email}         → code emailed
    POST /api/auth/verify  {email, code}   → session with access_token
    then every other call sends `Authorization: Bearer <access_token>`
"""

import logging

from fastapi import APIRouter, Depends

from aboapp.schemas.auth import (
    MessageResponse,
    SendCodeRequest,
    SessionResponse,
    UserContext,
    UserResponse,
    VerifyCodeRequest,
)
from aboapp.schemas.common import ErrorResponse
from aboapp.routes.deps import get_current_user
from aboapp.services.supabase_auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/code",
    response_model=MessageResponse,
    responses={
        400: {"description": "Rejected by the auth provider", "model": ErrorResponse},
        502: {"description": "Auth provider unreachable", "model": ErrorResponse},
    },
    summary="Email a one-time sign-in code",
)
async def send_code(payload: SendCodeRequest) -> MessageResponse:
    await auth_service.send_code(payload.email)
    return MessageResponse(message="Code sent. Please check your inbox.")


@router.post(
    "/verify",
    response_model=SessionResponse,
    responses={
        400: {"description": "Wrong or expired code", "model": ErrorResponse},
        502: {"description": "Auth provider unreachable", "model": ErrorResponse},
    },
    summary="Exchange the emailed code for a session",
)
async def verify_code(payload: VerifyCodeRequest) -> SessionResponse:
    session = await auth_service.verify_code(payload.email, payload.code)
    return SessionResponse(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_in=session.expires_in,
        user_id=session.user_id,
        email=session.email,
    )


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Sign out",
)
async def logout(user: UserContext = Depends(get_current_user)) -> MessageResponse:
    await auth_service.sign_out(user.access_token)
    logger.info("User %s signed out", user.user_id)
    return MessageResponse(message="Signed out")


@router.get(
    "/me",
    response_model=UserResponse,
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="Current identity",
)
async def me(user: UserContext = Depends(get_current_user)) -> UserResponse:
    return UserResponse(user_id=user.user_id, email=user.email)
