"""
HackReg Backend - Challenge SQLAlchemy Model
==============================================

What:  ORM model representing the `challenges` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by SQLAlchemyChallengeStore for insert-if-absent and atomic updates.
When:  Created on a user's first puzzle request; updated by each submission.

Table Design:
    - user_id primary key: one challenge per user, and the uniqueness that
      makes insert-if-absent atomic
    - people / alliances: JSON, stored exactly as generated
    - solution: BIGINT, never leaves the service layer
    - attempts / complete: progress, mutated only through conditional UPDATEs
"""

from datetime import datetime, timezone
from typing import Dict, List

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from hackreg.database import Base


class Challenge(Base):
    """
    One user's registration challenge.

    Lifecycle:
        1. Inserted on first GET (attempts=0, complete=False)
        2. attempts incremented by every POST while not complete
        3. complete flipped to True by the first correct POST; terminal
        4. Never deleted by this service
    """

    __tablename__ = "challenges"

    # ── Identity ──────────────────────────────────────────────────────────
    user_id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="Authenticated user identifier (opaque, owned by the auth service)",
    )

    # ── Puzzle ────────────────────────────────────────────────────────────
    # people: {name: weight}; alliances: [[name, name], ...]
    people: Mapped[Dict[str, int]] = mapped_column(
        JSON,
        nullable=False,
        comment="Person name to integer weight",
    )
    alliances: Mapped[List[List[str]]] = mapped_column(
        JSON,
        nullable=False,
        comment="Undirected alliance edges as name pairs",
    )
    solution: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        comment="Hidden target sum; never serialized",
    )

    # ── Progress ──────────────────────────────────────────────────────────
    attempts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Number of submissions made",
    )
    complete: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="Set once on the first correct submission",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this challenge was generated (UTC)",
    )

    def __repr__(self) -> str:
        # solution stays out of the repr
        return (
            f"<Challenge(user_id='{self.user_id}', attempts={self.attempts}, "
            f"complete={self.complete})>"
        )
