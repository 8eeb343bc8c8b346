"""
HackReg Backend - SQLAlchemy Challenge Store
==============================================

What:  ChallengeStore implementation over the `challenges` table.
How:   Uses storage-level atomic primitives instead of read-modify-write:

       create()  INSERT ... ON CONFLICT (user_id) DO NOTHING, then read back
       update()  UPDATE challenges
                 SET attempts = attempts + 1 [, complete = true]
                 WHERE user_id = :user_id AND complete = false

       Each write commits its own unit of work. A counted attempt therefore
       stays counted even though the request then fails with
       IncorrectAnswerError and get_db_session rolls back.
Who:   Used by ChallengeService through the ChallengeStore interface.

Supported dialects: postgresql (asyncpg) and sqlite (aiosqlite).
"""

import logging
from typing import Any, Callable, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from hackreg.models.challenge import Challenge
from hackreg.services.store_base import ChallengeStore

logger = logging.getLogger(__name__)

_UPSERT_INSERTS: Dict[str, Callable[..., Any]] = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class SQLAlchemyChallengeStore(ChallengeStore):
    """Challenge persistence backed by an AsyncSession."""

    async def find_by_user_id(self, db: AsyncSession, user_id: str) -> Optional[Challenge]:
        result = await db.execute(select(Challenge).where(Challenge.user_id == user_id))
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, challenge: Challenge) -> Challenge:
        dialect = db.get_bind().dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Unsupported database dialect for challenges: {dialect}")

        stmt = (
            insert(Challenge)
            .values(
                user_id=challenge.user_id,
                people=challenge.people,
                alliances=challenge.alliances,
                solution=challenge.solution,
                attempts=0,
                complete=False,
            )
            .on_conflict_do_nothing(index_elements=[Challenge.user_id])
        )
        result = await db.execute(stmt)
        await db.commit()

        if result.rowcount == 0:
            logger.info("Challenge for user %s already existed; keeping stored one", challenge.user_id)

        # populate_existing: the row may differ from anything already in the identity map
        stored = await db.get(Challenge, challenge.user_id, populate_existing=True)
        if stored is None:
            raise RuntimeError(f"Challenge for user {challenge.user_id} vanished after insert")
        return stored

    async def update_attempts_and_completion(
        self, db: AsyncSession, user_id: str, complete: bool
    ) -> Optional[Challenge]:
        values: Dict[str, Any] = {"attempts": Challenge.attempts + 1}
        if complete:
            values["complete"] = True

        stmt = (
            update(Challenge)
            .where(Challenge.user_id == user_id, Challenge.complete.is_(False))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        await db.commit()

        if result.rowcount == 0:
            return None
        return await db.get(Challenge, user_id, populate_existing=True)


# ── Singleton Instance ────────────────────────────────────────────────────
challenge_store = SQLAlchemyChallengeStore()
