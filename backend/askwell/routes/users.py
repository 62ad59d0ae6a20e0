"""
Askwell Backend — User and Statistics Route Handlers
====================================================

    GET /api/users               directory, newest first
    PUT /api/users/{id}          upsert own profile (called after sign-in)
    GET /api/users/{id}
    GET /api/users/{id}/stats    profile numbers
    GET /api/stats               community totals
"""

from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.database import get_db_session
from askwell.routes.deps import require_profile_owner
from askwell.schemas.common import ErrorResponse
from askwell.schemas.user import SiteStats, UserRead, UserStats, UserUpsert
from askwell.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])


@router.get("/users", response_model=List[UserRead], summary="List users")
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserRead]:
    return await user_service.list_users(db)


@router.put(
    "/users/{user_id}",
    response_model=UserRead,
    responses={
        401: {"model": ErrorResponse},
        403: {"description": "Not your profile", "model": ErrorResponse},
        409: {"description": "Email already in use", "model": ErrorResponse},
    },
    summary="Create or update your own user profile",
)
async def upsert_user(
    body: UserUpsert,
    user_id: str = Depends(require_profile_owner),
    db: AsyncSession = Depends(get_db_session),
) -> UserRead:
    return await user_service.upsert_user(db, user_id, **body.model_dump())


@router.get(
    "/users/{user_id}",
    response_model=UserRead,
    responses={404: {"model": ErrorResponse}},
    summary="Get a user",
)
async def get_user(
    user_id: str = Path(min_length=1, max_length=255),
    db: AsyncSession = Depends(get_db_session),
) -> UserRead:
    return await user_service.get_user(db, user_id)


@router.get(
    "/users/{user_id}/stats",
    response_model=UserStats,
    responses={404: {"model": ErrorResponse}},
    summary="Gamification statistics for a user",
)
async def get_user_stats(
    user_id: str = Path(min_length=1, max_length=255),
    db: AsyncSession = Depends(get_db_session),
) -> UserStats:
    return await user_service.get_user_stats(db, user_id)


@router.get("/stats", response_model=SiteStats, summary="Community totals")
async def get_site_stats(db: AsyncSession = Depends(get_db_session)) -> SiteStats:
    return await user_service.get_site_stats(db)
