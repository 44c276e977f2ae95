"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - EntryId, RecordingId, UserId, NameListId wrap UUIDs — never use bare UUID in domain logic
    - QueuePosition is 1-based
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: stored as-is in String columns and serialized to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

EntryId = NewType("EntryId", UUID)
RecordingId = NewType("RecordingId", UUID)
UserId = NewType("UserId", UUID)
NameListId = NewType("NameListId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

QueuePosition = NewType("QueuePosition", int)   # 1..N


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account roles — ADMIN and MANAGER may curate recordings and the queue."""
    CONTRIBUTOR = "CONTRIBUTOR"
    MANAGER = "MANAGER"
    OBSERVER = "OBSERVER"
    ADMIN = "ADMIN"


CURATOR_ROLES: tuple[UserRole, ...] = (UserRole.ADMIN, UserRole.MANAGER)


class RecordingStatus(str, Enum):
    """Recording review lifecycle — maps to DB `status` column."""
    UPLOADED = "UPLOADED"
    PROCESSING = "PROCESSING"
    PROCESSED = "PROCESSED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    QUEUED_FOR_EXHIBITION = "QUEUED_FOR_EXHIBITION"


class RecordingMethod(str, Enum):
    """How the audio reached the platform."""
    LIVE_BROWSER = "LIVE_BROWSER"
    OFFLINE_UPLOAD = "OFFLINE_UPLOAD"


class BulkActionType(str, Enum):
    """Uniform actions the admin bulk tooling can fan out over recording ids."""
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    SET_STATUS = "SET_STATUS"
    DELETE = "DELETE"
    ADD_TO_QUEUE = "ADD_TO_QUEUE"


class AudioFormat(str, Enum):
    """Container formats recognised from file headers."""
    WAV = "wav"
    MP3 = "mp3"
    MP4 = "mp4"
    OGG = "ogg"
    WEBM = "webm"
