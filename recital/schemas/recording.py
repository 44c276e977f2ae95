"""Recording Schemas — admin listing, status review, bulk actions and uploads.

Invariants:
    - BulkActionRequest.recording_ids is non-empty
    - SET_STATUS requires new_status; queue_position only meaningful for ADD_TO_QUEUE

Design Decisions:
    - Cross-field rules in model_validator: invalid bulk payloads fail as 400
      before any transaction starts
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from recital.core.domain_types import BulkActionType, RecordingStatus
from recital.schemas.queue import NameListSummary, UserSummary


class RecordingResponse(BaseModel):
    """Admin view of a recording."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    file_name: str
    file_size: int
    mime_type: str | None
    duration: float
    method: str
    status: str
    created_at: datetime
    user: UserSummary
    name_list: NameListSummary


class RecordingStatusUpdate(BaseModel):
    status: RecordingStatus


class BulkActionRequest(BaseModel):
    """One action over many recordings."""
    type: BulkActionType
    recording_ids: list[UUID] = Field(min_length=1)
    new_status: RecordingStatus | None = None
    queue_position: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def validate_action_fields(self):
        if self.type == BulkActionType.SET_STATUS and self.new_status is None:
            raise ValueError("SET_STATUS requires new_status")
        return self


class BulkActionResponse(BaseModel):
    success: bool = True
    affected: int
    dequeued: int | None = None
    skipped: list[str] | None = None
    message: str | None = None


class UploadResponse(BaseModel):
    """Upload acknowledgement with the advisory duration report."""
    success: bool = True
    recording_id: UUID
    file_name: str
    validation: dict
    message: str = "Recording saved successfully!"
