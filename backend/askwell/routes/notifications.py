"""
Askwell Backend — Notification Route Handlers
=============================================

All endpoints act on the caller's own inbox.

    GET   /api/notifications               newest first
    GET   /api/notifications/unread-count
    PATCH /api/notifications/{id}/read
    PATCH /api/notifications/read-all
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from askwell.config import settings
from askwell.database import get_db_session
from askwell.routes.deps import get_current_user_id
from askwell.schemas.common import ErrorResponse, MessageResponse
from askwell.schemas.notification import (
    MarkAllReadResponse,
    NotificationWithDetails,
    UnreadCount,
)
from askwell.services.notification_service import notification_service

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationWithDetails], summary="List notifications")
async def list_notifications(
    limit: int = Query(default=settings.notification_page_size, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> List[NotificationWithDetails]:
    return await notification_service.list_for_user(db, user_id, limit=limit)


@router.get("/unread-count", response_model=UnreadCount, summary="Unread notification count")
async def unread_count(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> UnreadCount:
    return UnreadCount(count=await notification_service.unread_count(db, user_id))


@router.patch(
    "/read-all",
    response_model=MarkAllReadResponse,
    summary="Mark every notification as read",
)
async def mark_all_read(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MarkAllReadResponse:
    updated = await notification_service.mark_all_read(db, user_id)
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)


@router.patch(
    "/{notification_id}/read",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Mark one notification as read",
)
async def mark_read(
    notification_id: int = Path(gt=0),
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await notification_service.mark_read(db, notification_id, user_id)
    return MessageResponse(message="Notification marked as read")
