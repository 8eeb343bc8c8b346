"""
HackReg Backend - Abstract Challenge Store Interface
======================================================

What:  Abstract base class for the persistence collaborator behind
       ChallengeService.
How:   Concrete implementations inherit from ChallengeStore and implement
       the three operations against their storage engine.
Who:   Called by ChallengeService; implemented by SQLAlchemyChallengeStore.
When:  Once or twice per challenge request.

Contract:
    - Every operation is keyed by user_id and touches one record.
    - create() is insert-if-absent: it never overwrites an existing challenge
      and always returns whichever row ended up stored.
    - update_attempts_and_completion() increments attempts atomically at the
      storage layer and only while the challenge is not complete.
    - Write operations are durable once they return.
"""

from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hackreg.models.challenge import Challenge


class ChallengeStore(ABC):
    """Keyed access to Challenge records."""

    @abstractmethod
    async def find_by_user_id(self, db: AsyncSession, user_id: str) -> Optional[Challenge]:
        """Return the user's challenge, or None if they have none yet."""
        ...

    @abstractmethod
    async def create(self, db: AsyncSession, challenge: Challenge) -> Challenge:
        """
        Insert ``challenge`` unless one already exists for its user_id.

        Returns:
            The stored challenge. When a concurrent request won the insert,
            this is that request's challenge, not the argument.
        """
        ...

    @abstractmethod
    async def update_attempts_and_completion(
        self, db: AsyncSession, user_id: str, complete: bool
    ) -> Optional[Challenge]:
        """
        Atomically add one attempt and, if ``complete``, mark the challenge solved.

        Applies only to a challenge that is not complete yet.

        Returns:
            The updated challenge, or None when no incomplete challenge
            exists for ``user_id`` (missing, or solved concurrently).
        """
        ...
