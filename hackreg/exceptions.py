"""
HackReg Backend - Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, dependencies and routes; caught by global handlers.
When:  During request processing when recoverable errors occur.

Exception Hierarchy:
    HackRegError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    ├── IncorrectAnswerError         → 400 Bad Request (attempt was counted)
    ├── UnauthorizedError            → 401 Unauthorized
    ├── RegistrationClosedError      → 403 Forbidden
    ├── ChallengeAlreadySolvedError  → 403 Forbidden
    ├── RateLimitExceededError       → 429 Too Many Requests
    └── DatabaseError                → 500 Internal Server Error

Every user-facing failure here is retryable by the user; none is fatal to
the process.
"""

from typing import Any, Dict, Optional


class HackRegError(Exception):
    """
    Base exception for all HackReg application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless the handler chooses to expose it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HackRegError):
    """
    Raised when client input fails a business-rule validation.

    HTTP:    400 Bad Request
    Schema-level problems (wrong JSON types) are still answered by
    FastAPI's own 422 handling.
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


class IncorrectAnswerError(HackRegError):
    """
    Raised when a submitted challenge answer does not match.

    HTTP:    400 Bad Request
    The message carries no hint about the size or direction of the miss.
    """

    def __init__(
        self,
        message: str = "Incorrect answer, try again",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(HackRegError):
    """
    Raised when a request reaches a user endpoint without an identity.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Authentication is required for this endpoint",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RegistrationClosedError(HackRegError):
    """
    Raised at the route boundary when the registration window has closed.

    HTTP:    403 Forbidden
    No challenge state is read or written once this is raised.
    """

    def __init__(
        self,
        message: str = "Registration is closed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ChallengeAlreadySolvedError(HackRegError):
    """
    Raised when a user submits again after solving their challenge.

    HTTP:    403 Forbidden
    Attempts are not incremented and the solution is not revealed.
    """

    def __init__(
        self,
        message: str = "Challenge has already been solved",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(HackRegError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL, constraint names) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(HackRegError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    Response includes a Retry-After header.
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
