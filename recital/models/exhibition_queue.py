"""Exhibition Queue ORM — dense 1..N playback order of approved recordings.

Invariants:
    - recording_id is unique: a recording occupies at most one slot
    - position is unique: range shifts park rows at negative positions
      before flipping them, so the index is never transiently violated
    - Rows are only mutated by services/exhibition_queue.py

Design Decisions:
    - No CHECK (position >= 1): the negative parking step needs it relaxed
      inside the transaction
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from recital.db.base import Base


class ExhibitionQueueEntry(Base):
    """One slot in the exhibition playback order."""
    __tablename__ = "exhibition_queue"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    recording_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("recordings.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    position: Mapped[int] = mapped_column(
        Integer, nullable=False, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    recording: Mapped["Recording"] = relationship(
        "Recording", lazy="selectin",
    )
