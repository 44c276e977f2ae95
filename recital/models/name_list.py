"""NameList ORM — one printed page of names a contributor reads aloud.

Invariants:
    - names is a JSON array of strings
    - total_names equals len(names) at creation

Design Decisions:
    - total_names denormalized: recording validation needs the count without
      decoding the JSON column
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from recital.db.base import Base


class NameList(Base):
    """Page of names."""
    __tablename__ = "name_lists"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    page_number: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    names: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_names: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    recordings: Mapped[list["Recording"]] = relationship(
        "Recording", back_populates="name_list",
    )
