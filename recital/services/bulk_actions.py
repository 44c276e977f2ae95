"""Bulk Actions — one admin action fanned out over a list of recording ids.

Invariants:
    - Each call is one transaction: status changes, deletions and queue
      writes commit together or not at all
    - ADD_TO_QUEUE skips already-queued and non-approved ids instead of failing
    - DELETE detaches queue entries and compacts before deleting recordings,
      and only removes audio files after the commit succeeded

Design Decisions:
    - Explicit dict dispatch over if/elif chains: one handler per BulkActionType
    - File cleanup after commit: a rolled-back delete must not lose audio
"""

import logging
from uuid import UUID

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime, timezone

from recital.core.domain_types import BulkActionType, RecordingStatus
from recital.core.errors import InvalidArgumentError
from recital.core.repository_protocols import AudioFileStore
from recital.models.recording import Recording
from recital.services.exhibition_queue import ExhibitionQueueService

logger = logging.getLogger(__name__)


class BulkActionService:
    """Applies APPROVE / REJECT / SET_STATUS / DELETE / ADD_TO_QUEUE."""

    def __init__(self, db: AsyncSession, file_store: AudioFileStore):
        self.db = db
        self.file_store = file_store
        self.queue = ExhibitionQueueService(db)
        self._handlers = {
            BulkActionType.APPROVE: self._approve,
            BulkActionType.REJECT: self._reject,
            BulkActionType.SET_STATUS: self._set_status,
            BulkActionType.DELETE: self._delete,
            BulkActionType.ADD_TO_QUEUE: self._add_to_queue,
        }

    async def apply(
        self,
        action: BulkActionType,
        recording_ids: list[UUID],
        new_status: RecordingStatus | None = None,
        queue_position: int | None = None,
    ) -> dict:
        """Run one bulk action and commit. Returns at least {"affected": int}."""
        if not recording_ids:
            raise InvalidArgumentError(
                "recording_ids must not be empty", "recording_ids",
            )
        handler = self._handlers[action]
        try:
            result, files_to_remove = await handler(
                recording_ids,
                new_status=new_status, queue_position=queue_position,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        for file_name in files_to_remove:
            self.file_store.delete(file_name)

        logger.info(
            f"Bulk {action.value} affected {result['affected']} recording(s)",
            extra={"action": action.value, "affected": result["affected"]},
        )
        return {"success": True, **result}

    async def _approve(self, recording_ids, **_) -> tuple[dict, list[str]]:
        return await self._update_status(recording_ids, RecordingStatus.APPROVED)

    async def _reject(self, recording_ids, **_) -> tuple[dict, list[str]]:
        return await self._update_status(recording_ids, RecordingStatus.REJECTED)

    async def _set_status(
        self, recording_ids, new_status=None, **_,
    ) -> tuple[dict, list[str]]:
        if new_status is None:
            raise InvalidArgumentError("New status is required", "new_status")
        return await self._update_status(recording_ids, new_status)

    async def _update_status(
        self, recording_ids: list[UUID], status: RecordingStatus,
    ) -> tuple[dict, list[str]]:
        result = await self.db.execute(
            update(Recording)
            .where(Recording.id.in_(recording_ids))
            .values(status=status.value, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )
        return {"affected": result.rowcount or 0}, []

    async def _delete(self, recording_ids, **_) -> tuple[dict, list[str]]:
        file_names = list((await self.db.execute(
            select(Recording.file_name).where(Recording.id.in_(recording_ids)),
        )).scalars().all())
        dequeued = await self.queue.detach_recordings(recording_ids)
        result = await self.db.execute(
            delete(Recording)
            .where(Recording.id.in_(recording_ids))
            .execution_options(synchronize_session=False),
        )
        return {
            "affected": result.rowcount or 0, "dequeued": dequeued,
        }, file_names

    async def _add_to_queue(
        self, recording_ids, queue_position=None, **_,
    ) -> tuple[dict, list[str]]:
        added, skipped = await self.queue.enqueue_many(
            recording_ids, start=queue_position,
        )
        if skipped:
            logger.info(
                f"Bulk enqueue skipped {len(skipped)} queued or unapproved recording(s)",
                extra={"action": BulkActionType.ADD_TO_QUEUE.value},
            )
        return {
            "affected": len(added),
            "skipped": [str(rid) for rid in skipped],
            "message": f"Added {len(added)} recordings to exhibition queue",
        }, []
