"""
Askwell Backend — Tag Route Handlers
====================================

    GET  /api/tags              all tags, by name
    GET  /api/tags/popular      most used tags
    GET  /api/tags/search?q=    autocomplete for the ask form
    POST /api/tags              create a tag ahead of use
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.config import settings
from askwell.database import get_db_session
from askwell.routes.deps import get_current_user_id
from askwell.schemas.common import ErrorResponse
from askwell.schemas.tag import TagCreate, TagRead
from askwell.services.tag_service import tag_service

router = APIRouter(prefix="/api/tags", tags=["Tags"])


@router.get("", response_model=List[TagRead], summary="List all tags")
async def list_tags(db: AsyncSession = Depends(get_db_session)) -> List[TagRead]:
    return await tag_service.list_tags(db)


@router.get("/popular", response_model=List[TagRead], summary="Most used tags")
async def popular_tags(
    limit: int = Query(default=settings.popular_tags_limit, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
) -> List[TagRead]:
    return await tag_service.popular_tags(db, limit=limit)


@router.get("/search", response_model=List[TagRead], summary="Search tags by name")
async def search_tags(
    q: str = Query(default="", max_length=50),
    db: AsyncSession = Depends(get_db_session),
) -> List[TagRead]:
    return await tag_service.search_tags(db, q)


@router.post(
    "",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Tag already exists", "model": ErrorResponse}},
    summary="Create a tag",
)
async def create_tag(
    body: TagCreate,
    _user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> TagRead:
    return await tag_service.create_tag(
        db, name=body.name, description=body.description, color=body.color,
    )
