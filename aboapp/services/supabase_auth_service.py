"""
AboApp Backend — Supabase Auth Service Implementation
=======================================================

What:  AuthProvider backed by the Supabase auth REST API (GoTrue).
How:   Plain httpx requests; one short-lived AsyncClient per call.
Who:   Singleton used by the auth routes, the bearer-token dependency, and
       the reminder job.

Endpoints used:
    POST /auth/v1/otp                   send code        (anon key)
    POST /auth/v1/verify                verify code      (anon key)
    GET  /auth/v1/user                  current user     (anon key + bearer)
    POST /auth/v1/logout                sign out         (anon key + bearer)
    GET  /auth/v1/admin/users/{id}      email lookup     (service role key)

No retries and no explicit timeouts: httpx defaults apply.
"""

import logging
import uuid
from typing import Any, Dict, Optional

import httpx

from aboapp.config import settings
from aboapp.exceptions import AuthenticationError, AuthProviderError
from aboapp.services.auth_base import AuthProvider, AuthSession, AuthUser

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """GoTrue reports errors under several keys depending on the endpoint."""
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Auth provider returned HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"Auth provider returned HTTP {response.status_code}"


def _parse_user(payload: Dict[str, Any]) -> AuthUser:
    return AuthUser(user_id=uuid.UUID(str(payload["id"])), email=payload.get("email"))


class SupabaseAuthService(AuthProvider):
    """
    Supabase email OTP sign-in.

    Args:
        base_url / anon_key / service_role_key: default to settings
        transport: optional httpx transport (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        service_role_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.supabase_url).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.supabase_anon_key
        self.service_role_key = (
            service_role_key if service_role_key is not None else settings.supabase_service_role_key
        )
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=f"{self.base_url}/auth/v1", transport=self._transport)

    def _headers(self, bearer: Optional[str] = None) -> Dict[str, str]:
        headers = {"apikey": self.anon_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Auth provider unreachable (%s %s): %s", method, path, str(e))
            raise AuthProviderError(
                message="The sign-in service is not reachable. Please try again.",
                context={"path": path, "error_type": type(e).__name__},
            )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        raise AuthProviderError(
            message=_error_message(response),
            status_code=response.status_code,
        )

    async def send_code(self, email: str) -> None:
        response = await self._request(
            "POST",
            "/otp",
            json={"email": email, "create_user": True},
            headers=self._headers(),
        )
        self._raise_for_status(response)
        logger.info("Sign-in code requested")

    async def verify_code(self, email: str, code: str) -> AuthSession:
        response = await self._request(
            "POST",
            "/verify",
            json={"type": "email", "email": email, "token": code.strip()},
            headers=self._headers(),
        )
        self._raise_for_status(response)
        body = response.json()
        user = _parse_user(body["user"])
        logger.info("Sign-in verified for user %s", user.user_id)
        return AuthSession(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            expires_in=body.get("expires_in"),
            user_id=user.user_id,
            email=user.email,
        )

    async def get_user(self, access_token: str) -> AuthUser:
        response = await self._request("GET", "/user", headers=self._headers(access_token))
        if response.status_code in (401, 403):
            raise AuthenticationError(message=_error_message(response))
        self._raise_for_status(response)
        return _parse_user(response.json())

    async def sign_out(self, access_token: str) -> None:
        response = await self._request("POST", "/logout", headers=self._headers(access_token))
        # an already-invalid token counts as signed out
        if response.status_code in (401, 403, 404):
            return
        self._raise_for_status(response)

    async def get_user_email(self, user_id: uuid.UUID) -> Optional[str]:
        """
        Look up a user's address with the service role key.

        Returns None for unknown users, users without an email, and provider
        failures. The reminder job skips those subscriptions.
        """
        headers = {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
        }
        try:
            response = await self._request("GET", f"/admin/users/{user_id}", headers=headers)
        except AuthProviderError as e:
            logger.warning("Email lookup for user %s failed: %s", user_id, e.message)
            return None
        if not response.is_success:
            logger.warning(
                "Email lookup for user %s returned HTTP %d: %s",
                user_id,
                response.status_code,
                _error_message(response),
            )
            return None
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            logger.warning(
                "Email lookup for user %s returned an unreadable body (%s)",
                user_id,
                response.headers.get("content-type", "no content-type"),
            )
            return None
        return body.get("email") or None


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = SupabaseAuthService()
