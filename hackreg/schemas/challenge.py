"""
HackReg Backend - Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between frontend and backend.
How:   FastAPI uses these models to validate request bodies, serialize responses,
       and generate OpenAPI documentation.
Who:   Used by route handlers as return types and by services to build views.

Schemas are separate from the SQLAlchemy model. ChallengeStatusResponse is an
explicit allow-list: it is always built field by field from a Challenge row,
never with from_attributes, so a column added to the model cannot leak into
a response.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ChallengeSolveRequest(BaseModel):
    """
    What:  Body of POST /registration/challenge/.
    Strict: "123" and 123.0 are rejected; only a JSON integer is compared.
    """
    solution: int = Field(strict=True, description="Proposed answer to the challenge")

    model_config = {"extra": "forbid"}


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ChallengeStatusResponse(BaseModel):
    """
    What:  The puzzle as the registrant sees it, plus their progress.
    Who:   Returned by GET and POST /registration/challenge/.

    Fields:
        people:    Name to integer weight
        alliances: Undirected name pairs
        attempts:  Submissions made so far
        complete:  Whether the challenge has been solved
    """
    people: Dict[str, int] = Field(description="Person name to integer weight")
    alliances: List[Tuple[str, str]] = Field(description="Undirected alliance edges")
    attempts: int = Field(ge=0, description="Number of submissions made")
    complete: bool = Field(description="Whether the challenge has been solved")


class RegistrationStatusResponse(BaseModel):
    """Returned by GET /registration/status/."""
    alive: bool = Field(description="Whether registration is currently open")


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "incorrect_answer")
        message: Human-readable description for display to users
        details: Optional extra context
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "challenge_already_solved",
            "message": "Challenge has already been solved",
            "request_id": "1f3a9c2e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and dependency status.
    Who:   Returned by GET /health for monitoring and load balancer health checks.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    registration: str = Field(description="Registration window: open, closed")
    uptime_seconds: float = Field(description="Seconds since service started")
