"""Name List Schemas — page-of-names payloads.

Invariants:
    - names holds at least one entry; blank names are dropped by the service
    - total_names is derived, never accepted from the client
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NameListCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    names: list[str] = Field(min_length=1)
    page_number: int = Field(0, ge=0)


class NameListResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    page_number: int
    names: list[str]
    total_names: int
    created_at: datetime
