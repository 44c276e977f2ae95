"""Exhibition Queue Schemas — insert/move payloads and the joined entry response.

Invariants:
    - position fields are >= 1; the upper bound depends on queue length and is
      checked by core/queue_ordering.py
    - QueueEntryResponse nests recording -> user / name_list summaries

Design Decisions:
    - Upper bound not expressed in Pydantic: it is state-dependent, so a 400
      from the service carries the actual allowed range
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class QueueInsert(BaseModel):
    """Add an approved recording to the queue."""
    recording_id: UUID
    position: int | None = Field(None, ge=1)


class QueueMove(BaseModel):
    """Move an entry to a new 1-based position."""
    position: int = Field(ge=1)


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None
    email: str
    role: str


class NameListSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    page_number: int


class QueuedRecording(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    file_name: str
    duration: float
    status: str
    user: UserSummary
    name_list: NameListSummary


class QueueEntryResponse(BaseModel):
    """Queue entry with the metadata the admin UI displays."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    recording_id: UUID
    position: int
    created_at: datetime
    updated_at: datetime
    recording: QueuedRecording
