"""Recording Service — admin listing, status review, deletion and upload intake.

Invariants:
    - Deleting a recording detaches its queue entry and compacts the queue in
      the same transaction; the audio file is removed only after commit
    - Uploads are sniffed from bytes (never trusted by extension) before
      anything is written to storage
    - New uploads always start as UPLOADED / OFFLINE_UPLOAD

Design Decisions:
    - Duration validation is advisory: the report is returned to the caller
      and logged, reviewers make the final call
    - Client-reported duration wins over the header estimate when present:
      only WAV headers give an exact value
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from pathlib import PurePath

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from recital.config import Settings
from recital.core.access import require_playback
from recital.core.audio_format import analyze_audio
from recital.core.domain_types import (
    NameListId, RecordingId, RecordingMethod, RecordingStatus, UserId,
)
from recital.core.errors import (
    ErrorContext, InvalidArgumentError, ResourceNotFoundError,
)
from recital.core.recording_validation import (
    ValidationReport, summarize, validate_duration,
)
from recital.core.repository_protocols import AudioFileStore
from recital.models.name_list import NameList
from recital.models.recording import Recording
from recital.services.exhibition_queue import ExhibitionQueueService

logger = logging.getLogger(__name__)


class RecordingService:
    """Recording reads and writes outside the bulk tooling."""

    def __init__(
        self, db: AsyncSession, file_store: AudioFileStore, settings: Settings,
    ):
        self.db = db
        self.file_store = file_store
        self.settings = settings

    async def list_recordings(
        self,
        status: RecordingStatus | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Recording]:
        query = select(Recording).order_by(Recording.created_at.desc())
        if status:
            query = query.where(Recording.status == status.value)
        result = await self.db.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    async def get(self, recording_id: RecordingId) -> Recording:
        recording = await self.db.get(Recording, recording_id)
        if not recording:
            raise ResourceNotFoundError(
                "Recording", str(recording_id),
                ErrorContext(recording_id=str(recording_id)),
            )
        return recording

    async def update_status(
        self, recording_id: RecordingId, status: RecordingStatus,
    ) -> Recording:
        recording = await self.get(recording_id)
        recording.status = status.value
        recording.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info(
            f"Recording status set to {status.value}",
            extra={"recording_id": str(recording_id)},
        )
        return recording

    async def locate_audio(
        self, recording_id: RecordingId, role: str, user_id: UserId,
    ) -> tuple[Recording, str]:
        """Recording and the on-disk path of its audio, if the caller may hear it."""
        recording = await self.get(recording_id)
        require_playback(
            role, str(user_id), str(recording.user_id), recording.status,
        )
        path = self.file_store.locate(recording.file_name)
        if path is None:
            raise ResourceNotFoundError(
                "Audio file", recording.file_name,
                ErrorContext(recording_id=str(recording_id)),
            )
        return recording, path

    async def delete(self, recording_id: RecordingId) -> None:
        recording = await self.get(recording_id)
        file_name = recording.file_name
        try:
            await ExhibitionQueueService(self.db).detach_recordings([recording_id])
            await self.db.execute(
                delete(Recording)
                .where(Recording.id == recording_id)
                .execution_options(synchronize_session=False),
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        self.db.expunge(recording)
        self.file_store.delete(file_name)
        logger.info(
            "Recording deleted", extra={"recording_id": str(recording_id)},
        )

    async def upload(
        self,
        user_id: UserId,
        name_list_id: NameListId,
        original_name: str,
        mime_type: str | None,
        data: bytes,
        title: str | None = None,
        reported_duration: float | None = None,
    ) -> tuple[Recording, ValidationReport]:
        """Store an offline upload and validate its length against the name list."""
        self._check_mime_type(mime_type)
        analysis = analyze_audio(data, self.settings.max_file_size_bytes)
        if analysis["is_corrupted"]:
            raise InvalidArgumentError(analysis["error"], "audio")

        name_list = await self.db.get(NameList, name_list_id)
        if not name_list:
            raise ResourceNotFoundError("Name list", str(name_list_id))

        if reported_duration is not None:
            duration = reported_duration
        else:
            duration = analysis["duration"] or 0.0
        report = validate_duration(
            duration,
            name_list.total_names,
            self.settings.min_duration_per_name,
            self.settings.max_duration_per_name,
        )

        extension = PurePath(original_name).suffix.lstrip(".") or analysis["format"].value
        file_name = f"recording_{int(time.time() * 1000)}_{user_id}.{extension}"
        recording = Recording(
            id=uuid.uuid4(),
            title=title or f"Recording {datetime.now(timezone.utc):%Y-%m-%d}",
            file_name=file_name,
            file_size=len(data),
            mime_type=mime_type,
            duration=duration,
            method=RecordingMethod.OFFLINE_UPLOAD.value,
            status=RecordingStatus.UPLOADED.value,
            user_id=user_id,
            name_list_id=name_list_id,
        )
        self.file_store.save(file_name, data)
        self.db.add(recording)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            self.file_store.delete(file_name)
            raise

        logger.info(
            f"Upload stored: {summarize(report)}",
            extra={"recording_id": str(recording.id), "user_id": str(user_id)},
        )
        return recording, report

    def _check_mime_type(self, mime_type: str | None) -> None:
        if mime_type and mime_type not in self.settings.supported_audio_types:
            raise InvalidArgumentError(
                f"Unsupported audio type: {mime_type}", "audio",
            )
