"""
Askwell Backend — Question Route Handlers
=========================================

What:  The question feed, question detail, asking, answering and accepting.
Who:   Called by the frontend home feed and question pages.

    GET  /api/questions                        feed (newest/active/unanswered/votes)
    GET  /api/questions/{id}                   detail, counts one view
    POST /api/questions                        ask
    GET  /api/questions/{id}/answers           answers, best first
    POST /api/questions/{id}/answers           answer
    POST /api/questions/{id}/accept-answer     accept (question author only)
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.config import settings
from askwell.database import get_db_session
from askwell.routes.deps import get_current_user_id
from askwell.schemas.common import ErrorResponse, MessageResponse
from askwell.schemas.question import (
    AcceptAnswerRequest,
    AnswerCreate,
    AnswerWithAuthor,
    QuestionCreate,
    QuestionWithDetails,
    SortBy,
)
from askwell.services.acceptance_service import acceptance_service
from askwell.services.answer_service import answer_service
from askwell.services.query_service import query_service
from askwell.services.question_service import question_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/questions", tags=["Questions"])


@router.get(
    "",
    response_model=List[QuestionWithDetails],
    summary="List questions",
)
async def list_questions(
    limit: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(default=0, ge=0),
    sort_by: SortBy = Query(default="newest"),
    db: AsyncSession = Depends(get_db_session),
) -> List[QuestionWithDetails]:
    return await query_service.list_questions(db, limit=limit, offset=offset, sort_by=sort_by)


@router.get(
    "/{question_id}",
    response_model=QuestionWithDetails,
    responses={404: {"model": ErrorResponse}},
    summary="Get a question with author, tags and accepted answer",
)
async def get_question(
    question_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db_session),
) -> QuestionWithDetails:
    """Counts a view, then reads the question (the response includes that view)."""
    await query_service.increment_views(db, question_id)
    return await query_service.get_question_detail(db, question_id)


@router.post(
    "",
    response_model=QuestionWithDetails,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid title, content or tags", "model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
    summary="Ask a question",
)
async def create_question(
    body: QuestionCreate,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> QuestionWithDetails:
    return await question_service.create_question(
        db,
        author_id=user_id,
        title=body.title,
        content=body.content,
        tag_names=body.tags,
        is_anonymous=body.is_anonymous,
    )


@router.get(
    "/{question_id}/answers",
    response_model=List[AnswerWithAuthor],
    responses={404: {"model": ErrorResponse}},
    summary="List answers, highest voted first",
)
async def list_answers(
    question_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db_session),
) -> List[AnswerWithAuthor]:
    return await query_service.list_answers(db, question_id)


@router.post(
    "/{question_id}/answers",
    response_model=AnswerWithAuthor,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Answer a question",
)
async def create_answer(
    body: AnswerCreate,
    question_id: int = Path(gt=0),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> AnswerWithAuthor:
    return await answer_service.create_answer(
        db,
        question_id=question_id,
        author_id=user_id,
        content=body.content,
        is_anonymous=body.is_anonymous,
    )


@router.post(
    "/{question_id}/accept-answer",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"description": "Not the question's author", "model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Accept an answer",
)
async def accept_answer(
    body: AcceptAnswerRequest,
    question_id: int = Path(gt=0),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await acceptance_service.accept_answer(
        db, question_id=question_id, answer_id=body.answer_id, user_id=user_id,
    )
    return MessageResponse(message="Answer accepted successfully")
