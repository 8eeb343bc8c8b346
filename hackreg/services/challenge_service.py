"""
HackReg Backend - Challenge Service (Business Logic Orchestrator)
===================================================================

What:  Fetch-or-create a user's registration challenge and judge submissions.
How:   Composes the challenge generator and a ChallengeStore.
Who:   Called by the /registration/challenge/ route handlers.
When:  On every challenge GET and POST.

State Machine (per user):
    NONE ──get_or_create──▶ ACTIVE(attempts=0, complete=False)
    ACTIVE ──wrong answer──▶ ACTIVE(attempts+1, complete=False)
    ACTIVE ──right answer──▶ SOLVED(attempts+1, complete=True)   (terminal)

The registration-open gate is checked by the route before submit() runs.

Views returned from this service are built field by field; the stored
solution never leaves this module.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hackreg.exceptions import (
    ChallengeAlreadySolvedError,
    DatabaseError,
    IncorrectAnswerError,
)
from hackreg.models.challenge import Challenge
from hackreg.schemas.challenge import ChallengeStatusResponse
from hackreg.services.challenge_generator import GeneratedChallenge, generate
from hackreg.services.challenge_store import challenge_store
from hackreg.services.store_base import ChallengeStore

logger = logging.getLogger(__name__)


def to_status_response(challenge: Challenge) -> ChallengeStatusResponse:
    """Allow-listed view of a challenge. Never includes the solution."""
    return ChallengeStatusResponse(
        people=dict(challenge.people),
        alliances=[(a, b) for a, b in challenge.alliances],
        attempts=challenge.attempts,
        complete=challenge.complete,
    )


class ChallengeService:
    """
    Business logic layer for registration challenges.

    Responsibilities:
        - get_or_create(): lazily generate and persist one puzzle per user
        - submit(): compare an answer, count the attempt, mark completion

    Error Handling Strategy:
        Domain outcomes are raised as IncorrectAnswerError and
        ChallengeAlreadySolvedError. SQLAlchemy failures are wrapped in
        DatabaseError so no storage detail reaches the client.
    """

    def __init__(
        self,
        store: Optional[ChallengeStore] = None,
        generator: Callable[[], GeneratedChallenge] = generate,
    ):
        self.store = store or challenge_store
        self.generator = generator

    async def get_or_create(self, db: AsyncSession, user_id: str) -> ChallengeStatusResponse:
        """
        Return the user's puzzle, generating it on first request.

        An existing challenge is returned unchanged and is never regenerated.
        If two first requests race, the store's insert-if-absent keeps the
        first row and both callers get that one.

        Raises:
            DatabaseError: Query or insert failed (→ 500)
        """
        try:
            challenge = await self.store.find_by_user_id(db, user_id)
            if challenge is None:
                generated = self.generator()
                challenge = await self.store.create(
                    db,
                    Challenge(
                        user_id=user_id,
                        people=generated.people,
                        alliances=[list(edge) for edge in generated.alliances],
                        solution=generated.solution,
                        attempts=0,
                        complete=False,
                    ),
                )
                logger.info(
                    "Challenge created for user %s: %d people, %d alliances",
                    user_id,
                    len(challenge.people),
                    len(challenge.alliances),
                )
            return to_status_response(challenge)

        except SQLAlchemyError as e:
            logger.error("Database error loading challenge for %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not load your challenge. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def submit(
        self, db: AsyncSession, user_id: str, candidate: int
    ) -> ChallengeStatusResponse:
        """
        Judge a submitted answer.

        Workflow:
            1. Load the challenge
            2. No challenge → IncorrectAnswerError, nothing written
            3. Already complete → ChallengeAlreadySolvedError, nothing written
            4. Exact integer comparison against the stored solution
            5. Atomic attempts += 1 (and complete = True when correct),
               conditional on the challenge still being incomplete
            6. Conditional update matched nothing → solved concurrently
               → ChallengeAlreadySolvedError

        Returns:
            ChallengeStatusResponse with complete=True on a correct answer.

        Raises:
            IncorrectAnswerError: Wrong answer (attempt counted) (→ 400)
            ChallengeAlreadySolvedError: Challenge already solved (→ 403)
            DatabaseError: Storage failure (→ 500)
        """
        try:
            challenge = await self.store.find_by_user_id(db, user_id)
            if challenge is None:
                logger.info("Submission from %s with no challenge on record", user_id)
                raise IncorrectAnswerError()
            if challenge.complete:
                raise ChallengeAlreadySolvedError()

            correct = candidate == challenge.solution
            updated = await self.store.update_attempts_and_completion(
                db, user_id, complete=correct
            )
        except SQLAlchemyError as e:
            logger.error("Database error judging submission for %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not record your submission. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

        if updated is None:
            raise ChallengeAlreadySolvedError()

        if not correct:
            logger.info("Incorrect submission from %s (attempt %d)", user_id, updated.attempts)
            raise IncorrectAnswerError()

        logger.info("Challenge solved by %s after %d attempts", user_id, updated.attempts)
        return to_status_response(updated)


# ── Singleton Instance ────────────────────────────────────────────────────
challenge_service = ChallengeService()
