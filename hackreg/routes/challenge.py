"""
HackReg Backend - Registration Challenge Route Handlers
=========================================================

What:  GET and POST /registration/challenge/.
How:   Resolves the caller's identity, checks the registration gate for
       submissions, delegates to ChallengeService, returns JSON.
Who:   Called by the registration frontend.

Request Flow (POST):
    1. Body validated as ChallengeSolveRequest (strict integer)
    2. Caller identity from get_current_user_id
    3. Registration closed → RegistrationClosedError (403), nothing touched
    4. ChallengeService.submit() judges and records the attempt
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hackreg.database import get_db_session
from hackreg.dependencies import get_current_user_id
from hackreg.exceptions import RegistrationClosedError
from hackreg.schemas.challenge import (
    ChallengeSolveRequest,
    ChallengeStatusResponse,
    ErrorResponse,
)
from hackreg.services.challenge_service import challenge_service
from hackreg.services.registration import is_registration_alive

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/registration", tags=["Registration"])


@router.get(
    "/challenge/",
    response_model=ChallengeStatusResponse,
    responses={
        200: {"description": "The challenge status", "model": ChallengeStatusResponse},
        401: {"description": "No authenticated user", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get the challenge for the current user",
    description=(
        "Returns the authenticated user's registration challenge, generating it "
        "on the first request. The same puzzle is returned on every later request."
    ),
)
async def get_challenge(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ChallengeStatusResponse:
    return await challenge_service.get_or_create(db=db, user_id=user_id)


@router.post(
    "/challenge/",
    response_model=ChallengeStatusResponse,
    responses={
        200: {
            "description": "Solved; the new challenge status is returned",
            "model": ChallengeStatusResponse,
        },
        400: {"description": "Incorrect answer, try again", "model": ErrorResponse},
        401: {"description": "No authenticated user", "model": ErrorResponse},
        403: {
            "description": "Registration is closed, or the challenge is already solved",
            "model": ErrorResponse,
        },
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    },
    summary="Attempt to solve the challenge",
    description=(
        "Submits an answer for the authenticated user's challenge. Every submission "
        "counts as an attempt, whether or not it is correct."
    ),
)
async def submit_challenge(
    body: ChallengeSolveRequest,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> ChallengeStatusResponse:
    """
    Error responses (handled by global exception handlers):
        HTTP 400: IncorrectAnswerError
        HTTP 403: RegistrationClosedError / ChallengeAlreadySolvedError
        HTTP 500: DatabaseError
    """
    if not is_registration_alive():
        logger.info("Rejected submission from %s: registration closed", user_id)
        raise RegistrationClosedError()

    return await challenge_service.submit(db=db, user_id=user_id, candidate=body.solution)
