"""Name List Routes — pages of names that uploads are validated against.

Invariants:
    - Any signed-in user may read name lists (contributors pick one to record)
    - Only curators create them
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from recital.api.dependencies import get_current_user, require_curator
from recital.infrastructure.database import get_db
from recital.models.user import User
from recital.schemas.name_list import NameListCreate, NameListResponse
from recital.services.name_lists import NameListService

router = APIRouter(prefix="/api/v1/name-lists", tags=["name-lists"])


@router.get("", response_model=list[NameListResponse])
async def list_name_lists(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await NameListService(db).list_name_lists(limit, offset)


@router.post(
    "", response_model=NameListResponse, status_code=status.HTTP_201_CREATED,
)
async def create_name_list(
    body: NameListCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_curator),
):
    return await NameListService(db).create(body.title, body.names, body.page_number)


@router.get("/{name_list_id}", response_model=NameListResponse)
async def get_name_list(
    name_list_id: UUID,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    return await NameListService(db).get(name_list_id)
