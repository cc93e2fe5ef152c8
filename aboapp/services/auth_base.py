"""
AboApp Backend — Abstract Auth Provider Interface
===================================================

What:  The contract the rest of the app relies on for sign-in and identity.
Why:   Routes and the reminder job never talk to a vendor API directly; a
       different hosted auth service only needs a new AuthProvider.
Who:   SupabaseAuthService implements it; tests substitute AsyncMocks.

Two kinds of operations:
    - user-facing (send_code, verify_code, get_user, sign_out): failures
      raise, and the message is shown to the user
    - administrative (get_user_email): used by the reminder job, never
      raises for a missing user, returns None instead
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthSession:
    """Session issued by the provider after a successful code check."""
    access_token: str
    refresh_token: Optional[str]
    expires_in: Optional[int]
    user_id: uuid.UUID
    email: Optional[str]


@dataclass(frozen=True)
class AuthUser:
    user_id: uuid.UUID
    email: Optional[str]


class AuthProvider(ABC):
    """
    Email one-time-code authentication.

    Contract:
        - send_code / verify_code raise AuthProviderError with the
          provider's message when the provider refuses
        - get_user raises AuthenticationError for unknown or expired tokens
        - get_user_email returns None when the address cannot be resolved
    """

    @abstractmethod
    async def send_code(self, email: str) -> None:
        """Email a one-time sign-in code; first use creates the account."""
        ...

    @abstractmethod
    async def verify_code(self, email: str, code: str) -> AuthSession:
        """Exchange the emailed code for a session."""
        ...

    @abstractmethod
    async def get_user(self, access_token: str) -> AuthUser:
        """Resolve the identity behind an access token."""
        ...

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        ...

    @abstractmethod
    async def get_user_email(self, user_id: uuid.UUID) -> Optional[str]:
        """Administrative lookup from user id to email address."""
        ...
