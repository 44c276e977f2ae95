"""Exhibition Queue Routes — list, insert, remove and move queue entries.

Invariants:
    - Every route requires a curator (ADMIN or MANAGER)
    - Responses for insert/move carry the joined recording/user/name-list summary
    - Ordering rules live in services/exhibition_queue.py, never here

Design Decisions:
    - PATCH for move: the only mutable attribute of an entry is its position
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from recital.api.dependencies import require_curator
from recital.infrastructure.database import get_db
from recital.models.user import User
from recital.schemas.queue import QueueEntryResponse, QueueInsert, QueueMove
from recital.services.exhibition_queue import ExhibitionQueueService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/exhibition-queue", tags=["exhibition-queue"])


@router.get("", response_model=list[QueueEntryResponse])
async def list_queue(
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_curator),
):
    """Queue in playback order."""
    return await ExhibitionQueueService(db).list_entries()


@router.post(
    "", response_model=QueueEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_to_queue(
    body: QueueInsert,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_curator),
):
    return await ExhibitionQueueService(db).insert(
        body.recording_id, body.position,
    )


@router.delete("/{entry_id}")
async def remove_from_queue(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_curator),
):
    await ExhibitionQueueService(db).remove(entry_id)
    return {"success": True}


@router.patch("/{entry_id}", response_model=QueueEntryResponse)
async def move_in_queue(
    entry_id: UUID,
    body: QueueMove,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_curator),
):
    return await ExhibitionQueueService(db).move(entry_id, body.position)
