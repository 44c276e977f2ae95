"""Name List Service — pages of names contributors read aloud.

Invariants:
    - total_names always equals len(names) of the stored list
    - Blank or whitespace-only names never reach the database
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from recital.core.domain_types import NameListId
from recital.core.errors import InvalidArgumentError, ResourceNotFoundError
from recital.models.name_list import NameList

logger = logging.getLogger(__name__)


class NameListService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_name_lists(self, limit: int = 50, offset: int = 0) -> list[NameList]:
        """Newest first."""
        result = await self.db.execute(
            select(NameList)
            .order_by(NameList.created_at.desc())
            .limit(limit).offset(offset),
        )
        return list(result.scalars().all())

    async def get(self, name_list_id: NameListId) -> NameList:
        name_list = await self.db.get(NameList, name_list_id)
        if not name_list:
            raise ResourceNotFoundError("Name list", str(name_list_id))
        return name_list

    async def create(
        self, title: str, names: list[str], page_number: int = 0,
    ) -> NameList:
        cleaned = [n.strip() for n in names if n and n.strip()]
        if not cleaned:
            raise InvalidArgumentError("Name list needs at least one name", "names")
        name_list = NameList(
            title=title.strip(),
            page_number=page_number,
            names=cleaned,
            total_names=len(cleaned),
        )
        self.db.add(name_list)
        await self.db.commit()
        logger.info(f"Name list '{name_list.title}' created with {len(cleaned)} names")
        return name_list
