"""Exhibition Queue Service — applies queue_ordering plans inside one DB transaction.

Invariants:
    - insert/remove/move each commit exactly once; any failure rolls back the
      whole shift so no partial re-indexing is ever observable
    - Range shifts park rows at negative positions, then flip them positive,
      so the unique index on position holds after every statement
    - enqueue_many/detach_recordings never commit: the bulk action owning
      the transaction commits once for the whole batch

Design Decisions:
    - Core UPDATE statements with synchronize_session=False: one statement per
      range regardless of queue length; callers re-read with populate_existing
    - IntegrityError on commit mapped to ConflictError: two admins racing to
      queue the same recording get a 409, not a 503
"""

import logging
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Sequence

from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from recital.core.domain_types import (
    EntryId, QueuePosition, RecordingId, RecordingStatus,
)
from recital.core.errors import (
    ConflictError, ErrorContext, InvalidStateError, ResourceNotFoundError,
)
from recital.core.queue_ordering import (
    PositionShift, check_insert_position, is_dense, plan_compaction,
    plan_insert, plan_move, plan_remove,
)
from recital.models.exhibition_queue import ExhibitionQueueEntry
from recital.models.recording import Recording

logger = logging.getLogger(__name__)

_PARKED_POSITION = 0


class ExhibitionQueueService:
    """Dense 1..N ordering of approved recordings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ──────────────────────────────────────────────────

    async def list_entries(self) -> list[ExhibitionQueueEntry]:
        """All entries ordered by position, with recording metadata loaded."""
        result = await self.db.execute(
            select(ExhibitionQueueEntry)
            .order_by(ExhibitionQueueEntry.position)
            .execution_options(populate_existing=True),
        )
        entries = list(result.scalars().all())
        if not is_dense([e.position for e in entries]):
            logger.error(
                "Exhibition queue positions are not dense",
                extra={"affected": len(entries)},
            )
        return entries

    async def get_entry(self, entry_id: EntryId) -> ExhibitionQueueEntry:
        result = await self.db.execute(
            select(ExhibitionQueueEntry)
            .where(ExhibitionQueueEntry.id == entry_id)
            .execution_options(populate_existing=True),
        )
        entry = result.scalar_one_or_none()
        if not entry:
            raise ResourceNotFoundError(
                "Queue entry", str(entry_id),
                ErrorContext(entry_id=str(entry_id)),
            )
        return entry

    async def count(self) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(ExhibitionQueueEntry),
        )
        return result.scalar_one()

    async def max_position(self) -> int | None:
        result = await self.db.execute(
            select(func.max(ExhibitionQueueEntry.position)),
        )
        return result.scalar_one_or_none()

    # ─── Single-entry operations ────────────────────────────────

    async def insert(
        self, recording_id: RecordingId, position: QueuePosition | None = None,
    ) -> ExhibitionQueueEntry:
        """Queue an approved recording at the tail or at `position`."""
        await self._require_approved(recording_id)
        await self._require_not_queued(recording_id)
        plan = plan_insert(
            await self.count(), position, current_max=await self.max_position(),
        )

        entry_id = uuid.uuid4()
        async with self._transaction(recording_id=str(recording_id)):
            if plan.shift:
                await self._apply_shift(plan.shift)
            now = datetime.now(timezone.utc)
            self.db.add(ExhibitionQueueEntry(
                id=entry_id, recording_id=recording_id,
                position=plan.position, created_at=now, updated_at=now,
            ))

        logger.info(
            f"Queued recording at position {plan.position}",
            extra={"entry_id": str(entry_id), "recording_id": str(recording_id)},
        )
        return await self.get_entry(entry_id)

    async def remove(self, entry_id: EntryId) -> None:
        """Delete an entry and close the gap behind it."""
        entry = await self.get_entry(entry_id)
        removed_position = entry.position

        async with self._transaction(entry_id=str(entry_id)):
            await self.db.execute(
                delete(ExhibitionQueueEntry)
                .where(ExhibitionQueueEntry.id == entry_id)
                .execution_options(synchronize_session=False),
            )
            await self._apply_shift(plan_remove(removed_position))
        self.db.expunge(entry)

        logger.info(
            f"Removed queue entry from position {removed_position}",
            extra={"entry_id": str(entry_id)},
        )

    async def move(
        self, entry_id: EntryId, new_position: QueuePosition,
    ) -> ExhibitionQueueEntry:
        """Move an entry to `new_position`, sliding the entries in between."""
        entry = await self.get_entry(entry_id)
        old_position = entry.position
        shift = plan_move(old_position, new_position, await self.count())
        if shift is None:
            return entry

        async with self._transaction(entry_id=str(entry_id)):
            await self._set_position(entry_id, _PARKED_POSITION)
            await self._apply_shift(shift)
            await self._set_position(entry_id, new_position)

        logger.info(
            f"Moved queue entry {old_position} -> {new_position}",
            extra={"entry_id": str(entry_id), "position": new_position},
        )
        return await self.get_entry(entry_id)

    # ─── Batch units (caller commits) ───────────────────────────

    async def enqueue_many(
        self, recording_ids: Sequence[RecordingId], start: QueuePosition | None = None,
    ) -> tuple[list[RecordingId], list[RecordingId]]:
        """Queue approved, not-yet-queued ids in request order.

        Returns (added, skipped). Already-queued and non-approved ids are
        skipped rather than failing the batch.
        """
        requested = list(dict.fromkeys(recording_ids))
        approved = set((await self.db.execute(
            select(Recording.id).where(
                Recording.id.in_(requested),
                Recording.status == RecordingStatus.APPROVED.value,
            ),
        )).scalars().all())
        queued = set((await self.db.execute(
            select(ExhibitionQueueEntry.recording_id).where(
                ExhibitionQueueEntry.recording_id.in_(requested),
            ),
        )).scalars().all())

        count = await self.count()
        if start is not None:
            check_insert_position(count, start)

        added = [rid for rid in requested if rid in approved and rid not in queued]
        skipped = [rid for rid in requested if rid not in added]
        if not added:
            return added, skipped

        plan = plan_insert(
            count, start, span=len(added),
            current_max=await self.max_position(),
        )
        if plan.shift:
            await self._apply_shift(plan.shift)
        now = datetime.now(timezone.utc)
        self.db.add_all([
            ExhibitionQueueEntry(
                id=uuid.uuid4(), recording_id=rid, position=plan.position + i,
                created_at=now, updated_at=now,
            )
            for i, rid in enumerate(added)
        ])
        await self.db.flush()
        return added, skipped

    async def detach_recordings(self, recording_ids: Sequence[RecordingId]) -> int:
        """Drop the entries of recordings about to be deleted, then compact."""
        result = await self.db.execute(
            delete(ExhibitionQueueEntry)
            .where(ExhibitionQueueEntry.recording_id.in_(list(recording_ids)))
            .execution_options(synchronize_session=False),
        )
        removed = result.rowcount or 0
        if removed:
            await self.compact()
        return removed

    async def compact(self) -> int:
        """Renumber entries to 1..N preserving order. Returns rows moved."""
        rows = (await self.db.execute(
            select(ExhibitionQueueEntry.id, ExhibitionQueueEntry.position)
            .order_by(ExhibitionQueueEntry.position),
        )).all()
        ids_by_position = {position: entry_id for entry_id, position in rows}
        moves = plan_compaction(list(ids_by_position))
        if not moves:
            return 0

        moved_ids = [ids_by_position[current] for current, _ in moves]
        await self.db.execute(
            update(ExhibitionQueueEntry)
            .where(ExhibitionQueueEntry.id.in_(moved_ids))
            .values(position=-ExhibitionQueueEntry.position)
            .execution_options(synchronize_session=False),
        )
        for current, target in moves:
            await self._set_position(ids_by_position[current], target)
        return len(moves)

    # ─── Internals ──────────────────────────────────────────────

    @asynccontextmanager
    async def _transaction(self, **log_extra: str) -> AsyncGenerator[None, None]:
        try:
            yield
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                f"Queue write rejected by constraint: {e}", extra=log_extra,
            )
            raise ConflictError(
                "Exhibition queue changed concurrently; reload and retry",
            ) from e
        except Exception:
            await self.db.rollback()
            raise

    async def _apply_shift(self, shift: PositionShift) -> None:
        conditions = [ExhibitionQueueEntry.position >= shift.start]
        if shift.end is not None:
            conditions.append(ExhibitionQueueEntry.position <= shift.end)
        now = datetime.now(timezone.utc)
        # park the range at negatives, then flip
        await self.db.execute(
            update(ExhibitionQueueEntry)
            .where(*conditions)
            .values(
                position=-(ExhibitionQueueEntry.position + shift.delta),
                updated_at=now,
            )
            .execution_options(synchronize_session=False),
        )
        await self.db.execute(
            update(ExhibitionQueueEntry)
            .where(ExhibitionQueueEntry.position < 0)
            .values(position=-ExhibitionQueueEntry.position)
            .execution_options(synchronize_session=False),
        )

    async def _set_position(self, entry_id: EntryId, position: int) -> None:
        await self.db.execute(
            update(ExhibitionQueueEntry)
            .where(ExhibitionQueueEntry.id == entry_id)
            .values(position=position, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False),
        )

    async def _require_approved(self, recording_id: RecordingId) -> Recording:
        recording = await self.db.get(Recording, recording_id)
        ctx = ErrorContext(recording_id=str(recording_id))
        if not recording:
            raise ResourceNotFoundError("Recording", str(recording_id), ctx)
        if recording.status != RecordingStatus.APPROVED.value:
            raise InvalidStateError(
                "Only approved recordings can be added to the exhibition queue",
                ctx,
            )
        return recording

    async def _require_not_queued(self, recording_id: RecordingId) -> None:
        result = await self.db.execute(
            select(ExhibitionQueueEntry.id)
            .where(ExhibitionQueueEntry.recording_id == recording_id),
        )
        if result.scalar_one_or_none() is not None:
            raise ConflictError(
                "Recording is already in the exhibition queue",
                ErrorContext(recording_id=str(recording_id)),
            )
