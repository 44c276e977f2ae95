"""Admin Statistics — project-wide counts for the admin dashboard.

Invariants:
    - Every RecordingStatus appears in recordings_by_status, zero included
    - Sums over an empty table are 0, never None
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from recital.core.domain_types import RecordingStatus
from recital.models.exhibition_queue import ExhibitionQueueEntry
from recital.models.name_list import NameList
from recital.models.recording import Recording
from recital.models.user import User


async def _count(db: AsyncSession, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


async def collect_stats(db: AsyncSession) -> dict:
    by_status = {status.value: 0 for status in RecordingStatus}
    rows = await db.execute(
        select(Recording.status, func.count()).group_by(Recording.status),
    )
    for status, n in rows.all():
        by_status[status] = n

    total_duration, total_size = (await db.execute(
        select(
            func.coalesce(func.sum(Recording.duration), 0.0),
            func.coalesce(func.sum(Recording.file_size), 0),
        ),
    )).one()

    return {
        "total_recordings": sum(by_status.values()),
        "recordings_by_status": by_status,
        "pending_recordings": by_status[RecordingStatus.UPLOADED.value],
        "approved_recordings": by_status[RecordingStatus.APPROVED.value],
        "rejected_recordings": by_status[RecordingStatus.REJECTED.value],
        "queued_recordings": await _count(db, ExhibitionQueueEntry),
        "total_users": await _count(db, User),
        "total_name_lists": await _count(db, NameList),
        "total_duration": float(total_duration),
        "total_file_size": int(total_size),
    }
