"""Recording Routes — admin review, bulk actions and contributor uploads.

Invariants:
    - List/status/bulk require a curator; single delete requires ADMIN
    - Upload requires any authenticated user; the recording is owned by them
    - Audio playback: owner and curators always, others only approved audio
    - /bulk and /upload declared before /{recording_id} so they never parse as ids

Design Decisions:
    - Upload reads the whole file once: size is capped by settings and the
      bytes are needed for sniffing, hashing and storage anyway
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from recital.api.dependencies import (
    get_current_user, require_admin, require_curator,
)
from recital.config import Settings, get_settings
from recital.core.domain_types import RecordingStatus
from recital.infrastructure.database import get_db
from recital.infrastructure.file_storage import LocalFileStore, get_file_store
from recital.models.user import User
from recital.schemas.recording import (
    BulkActionRequest, BulkActionResponse, RecordingResponse,
    RecordingStatusUpdate, UploadResponse,
)
from recital.services.bulk_actions import BulkActionService
from recital.services.recordings import RecordingService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/recordings", tags=["recordings"])


def _service(
    db: AsyncSession = Depends(get_db),
    file_store: LocalFileStore = Depends(get_file_store),
    settings: Settings = Depends(get_settings),
) -> RecordingService:
    return RecordingService(db, file_store, settings)


@router.get("", response_model=list[RecordingResponse])
async def list_recordings(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: RecordingStatus | None = Query(None, alias="status"),
    service: RecordingService = Depends(_service),
    _: User = Depends(require_curator),
):
    """Recordings newest first."""
    return await service.list_recordings(status_filter, limit, offset)


@router.post("/bulk", response_model=BulkActionResponse)
async def bulk_action(
    body: BulkActionRequest,
    db: AsyncSession = Depends(get_db),
    file_store: LocalFileStore = Depends(get_file_store),
    _: User = Depends(require_curator),
):
    """Apply one action to many recordings in a single transaction."""
    return await BulkActionService(db, file_store).apply(
        body.type, body.recording_ids,
        new_status=body.new_status, queue_position=body.queue_position,
    )


@router.post("/upload", response_model=UploadResponse)
async def upload_recording(
    audio: UploadFile = File(...),
    name_list_id: UUID = Form(...),
    title: str | None = Form(None),
    duration: float | None = Form(None, ge=0),
    service: RecordingService = Depends(_service),
    user: User = Depends(get_current_user),
):
    data = await audio.read()
    recording, report = await service.upload(
        user_id=user.id,
        name_list_id=name_list_id,
        original_name=audio.filename or "",
        mime_type=audio.content_type,
        data=data,
        title=title,
        reported_duration=duration,
    )
    return UploadResponse(
        recording_id=recording.id,
        file_name=recording.file_name,
        validation=report.to_dict(),
    )


@router.get("/{recording_id}/audio")
async def stream_audio(
    recording_id: UUID,
    service: RecordingService = Depends(_service),
    user: User = Depends(get_current_user),
):
    """Serve the audio file. Range requests are answered by FileResponse."""
    recording, path = await service.locate_audio(recording_id, user.role, user.id)
    return FileResponse(
        path, media_type=recording.mime_type or "audio/mpeg",
        filename=recording.file_name, content_disposition_type="inline",
    )


@router.patch("/{recording_id}", response_model=RecordingResponse)
async def update_recording_status(
    recording_id: UUID,
    body: RecordingStatusUpdate,
    service: RecordingService = Depends(_service),
    _: User = Depends(require_curator),
):
    return await service.update_status(recording_id, body.status)


@router.delete("/{recording_id}")
async def delete_recording(
    recording_id: UUID,
    service: RecordingService = Depends(_service),
    _: User = Depends(require_admin),
):
    await service.delete(recording_id)
    return {"success": True, "message": "Recording deleted successfully"}
