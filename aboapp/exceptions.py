"""
AboApp Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the different failure paths.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON error responses with the right HTTP status code.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    AboAppError (base)
    ├── ValidationError        → 400 Bad Request (rejected before any write)
    ├── AuthenticationError    → 401 Unauthorized
    ├── NotFoundError          → 404 Not Found
    ├── AuthProviderError      → 400 / 502 (auth collaborator said no / was unreachable)
    ├── EmailDeliveryError     → recorded per recipient by the reminder job
    └── StoreError             → 500 Internal Server Error (raw store message)

Nothing in this hierarchy implies a retry. Every failure ends the
operation; the client decides whether to submit again.
"""

from typing import Any, Dict, Optional


class AboAppError(Exception):
    """
    Base exception for all AboApp application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged, returned only where noted)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(AboAppError):
    """
    Raised when client input fails a business rule.

    When:  Active subscription without renewal date, unparseable price,
           reactivation without a date, custom_days mismatch.
    HTTP:  400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(AboAppError):
    """
    Raised when a request needs an identity and none could be resolved.

    When:  Missing bearer token, or the auth provider does not recognize it.
    HTTP:  401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Not signed in",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(AboAppError):
    """
    Raised when a requested resource does not exist.

    Subscriptions owned by another user are reported as not found too, so
    ids cannot be probed across accounts.
    HTTP:  404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class AuthProviderError(AboAppError):
    """
    Raised when the auth collaborator rejects a request or cannot be reached.

    The provider's own message is passed through as `message` so the client
    can show it inline (e.g. "Token has expired or is invalid").

    Attributes:
        status_code: HTTP status returned by the provider, None if unreachable
    """

    def __init__(
        self,
        message: str = "Authentication service error",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["provider_status"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class EmailDeliveryError(AboAppError):
    """
    Raised when the email collaborator cannot be reached at all.

    HTTP-level rejections are not errors: the reminder job records the
    provider's status code instead. This covers transport failures only.
    """

    def __init__(
        self,
        message: str = "Email provider could not be reached",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(AboAppError):
    """
    Raised when a subscription store operation fails.

    The store's message is surfaced to the client unchanged so it can be
    shown as an inline alert.
    HTTP:  500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "The subscription store reported an error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
