"""
HackReg Backend - Request Dependencies
========================================

What:  FastAPI dependencies shared by the route modules.
How:   Reads the caller's id from the X-User-Id header set by the auth
       gateway; blank ids raise UnauthorizedError, overlong ids raise
       ValidationError.
Who:   Injected into the /registration/challenge/ handlers via Depends().
When:  Per request, before the route body runs.
"""

from fastapi import Header

from hackreg.exceptions import UnauthorizedError, ValidationError

# Matches the challenges.user_id column width.
MAX_USER_ID_LENGTH = 255


def get_current_user_id(
    x_user_id: str = Header(
        default="",
        description="Authenticated user id, set by the upstream auth gateway",
    ),
) -> str:
    """
    Return the authenticated user's id.

    Token verification happens upstream; by the time a request gets here the
    gateway has resolved the caller and forwarded the id in ``X-User-Id``.
    """
    user_id = x_user_id.strip()
    if not user_id:
        raise UnauthorizedError()
    if len(user_id) > MAX_USER_ID_LENGTH:
        raise ValidationError(
            message=f"User id must be at most {MAX_USER_ID_LENGTH} characters",
            field="X-User-Id",
        )
    return user_id
