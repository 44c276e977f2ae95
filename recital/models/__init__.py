"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Recording is the center: owned by a User and a NameList, referenced by
      at most one ExhibitionQueueEntry

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from recital.models.user import User  # noqa: F401
from recital.models.name_list import NameList  # noqa: F401
from recital.models.recording import Recording  # noqa: F401
from recital.models.exhibition_queue import ExhibitionQueueEntry  # noqa: F401
