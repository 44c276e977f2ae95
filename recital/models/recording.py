"""Recording ORM — an uploaded reading of one name list.

Invariants:
    - Always belongs to a User (user_id FK) and a NameList (name_list_id FK)
    - status is one of RecordingStatus values
    - At most one exhibition queue entry references it (unique FK on the queue side)

Design Decisions:
    - file_name only, not a full path: storage root comes from settings
    - No ORM relationship back to the queue: deletions go through the queue
      service so the remaining positions are compacted in the same transaction
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from recital.db.base import Base
from recital.core.domain_types import RecordingMethod, RecordingStatus


class Recording(Base):
    """Recording entity — reviewed, then optionally queued for exhibition."""
    __tablename__ = "recordings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    file_name: Mapped[str] = mapped_column(String(300), nullable=False)
    file_size: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    mime_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    duration: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0,
    )
    method: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RecordingMethod.LIVE_BROWSER.value,
    )
    status: Mapped[str] = mapped_column(
        String(30), nullable=False, default=RecordingStatus.UPLOADED.value,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    name_list_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("name_lists.id"), nullable=False,
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
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship(
        "User", back_populates="recordings", lazy="selectin",
    )
    name_list: Mapped["NameList"] = relationship(
        "NameList", back_populates="recordings", lazy="selectin",
    )
