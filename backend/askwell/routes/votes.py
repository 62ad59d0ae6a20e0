"""
Askwell Backend — Vote Route Handlers
=====================================

    POST /api/votes                               cast / flip / toggle off
    GET  /api/votes/{target_type}/{target_id}     the caller's current vote
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.database import get_db_session
from askwell.models.vote import TargetType
from askwell.routes.deps import get_current_user_id
from askwell.schemas.common import ErrorResponse
from askwell.schemas.vote import VoteCast, VoteRead, VoteResult
from askwell.services.vote_service import vote_service

router = APIRouter(prefix="/api/votes", tags=["Votes"])


@router.post(
    "",
    response_model=VoteResult,
    responses={
        201: {"description": "New vote recorded", "model": VoteResult},
        401: {"model": ErrorResponse},
        404: {"description": "Target not found", "model": ErrorResponse},
        409: {"description": "Concurrent duplicate vote", "model": ErrorResponse},
    },
    summary="Vote on a question or answer",
    description=(
        "Casting the same vote twice removes it; casting the opposite vote flips it. "
        "Returns 201 when a new vote was recorded and 200 otherwise."
    ),
)
async def cast_vote(
    body: VoteCast,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> VoteResult:
    result = await vote_service.cast_vote(
        db,
        user_id=user_id,
        target_type=body.target_type,
        target_id=body.target_id,
        vote_type=body.vote_type,
    )
    if result.created:
        response.status_code = status.HTTP_201_CREATED
    return result


@router.get(
    "/{target_type}/{target_id}",
    response_model=Optional[VoteRead],
    responses={401: {"model": ErrorResponse}},
    summary="The caller's vote on a target (null if none)",
)
async def get_user_vote(
    target_type: TargetType,
    target_id: int = Path(gt=0),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[VoteRead]:
    return await vote_service.get_user_vote(db, user_id, target_type, target_id)
