"""User ORM — platform accounts and their roles.

Invariants:
    - email is unique
    - role is one of UserRole values
    - api_token_hash stores sha256(token), never the token itself

Design Decisions:
    - Bearer token per user over server-side sessions: the admin UI is the
      only client and sign-in lives outside this service
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from recital.db.base import Base
from recital.core.domain_types import UserRole


class User(Base):
    """Account that records, reviews, or curates."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True,
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=UserRole.CONTRIBUTOR.value,
    )
    api_token_hash: Mapped[str | None] = mapped_column(
        String(64), nullable=True, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    recordings: Mapped[list["Recording"]] = relationship(
        "Recording", back_populates="user",
    )
