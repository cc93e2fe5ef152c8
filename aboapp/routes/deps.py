"""
AboApp Backend — Shared Route Dependencies
============================================

What:  Resolves the signed-in user from the `Authorization: Bearer` header.
How:   The token is handed to the auth provider; its answer becomes the
       UserContext passed explicitly into every service call.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from aboapp.exceptions import AuthenticationError
from aboapp.schemas.auth import UserContext
from aboapp.services.supabase_auth_service import auth_service

# auto_error=False: a missing header goes through our AuthenticationError handler
http_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer),
) -> UserContext:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(message="Please sign in first")

    user = await auth_service.get_user(credentials.credentials)
    return UserContext(
        user_id=user.user_id,
        email=user.email,
        access_token=credentials.credentials,
    )
