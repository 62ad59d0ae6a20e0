"""
Askwell Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the Q&A domain.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the right status code.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    AskwellError (base)
    ├── ValidationError              → 400 Bad Request
    ├── AuthenticationRequiredError  → 401 Unauthorized (no acting user)
    ├── UnauthorizedError            → 403 Forbidden (acting user lacks ownership)
    ├── NotFoundError                → 404 Not Found
    ├── ConflictError                → 409 Conflict
    ├── DatabaseError                → 500 Internal Server Error
    └── RateLimitExceededError       → 429 Too Many Requests

Every error raised inside a service aborts the request's transaction, so the
store returns to its pre-call state.
"""

from typing import Any, Dict, Optional


class AskwellError(Exception):
    """
    Base exception for all Askwell application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 4xx details)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(AskwellError):
    """
    Raised when client input breaks a business rule.

    When:    Empty title, no tags, too many tags, tag name too long.
    HTTP:    400 Bad Request

    Schema-level problems (wrong JSON types, missing fields) are rejected by
    FastAPI with 422 before a service is ever called.
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


class AuthenticationRequiredError(AskwellError):
    """
    Raised when a request needs an acting user and none was identified.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Sign in to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(AskwellError):
    """
    Raised when the acting user does not own the resource being changed.

    When:    Accepting an answer on somebody else's question.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(AskwellError):
    """
    Raised when a requested resource does not exist.

    When:    Unknown question/answer id, vote on a missing target,
             marking a notification that is not the caller's.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records; services convert that
    into this exception.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(AskwellError):
    """
    Raised when a write collides with a concurrent write or a unique rule.

    When:    Duplicate tag name, two simultaneous first votes by one user
             on one target (unique constraint on the vote ledger).
    HTTP:    409 Conflict — the client may retry.
    """

    def __init__(
        self,
        message: str = "The request conflicts with the current state of the resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(AskwellError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Details
    (SQL, constraint names) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(AskwellError):
    """
    Raised when a client exceeds the per-IP write rate limit.

    HTTP:    429 Too Many Requests (with a Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
