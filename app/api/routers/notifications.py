# app/api/routers/notifications.py - The caller's own notifications
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging

from app.core.db import get_db
from app.api.deps.snapshot import get_queries
from app.schemas.notification import NotificationList, NotificationReadOut
from app.services.mutations import prepare_mark_notification_read
from app.services.persistence import apply_mark_notification_read
from app.services.scoped_queries import ScopedQueries

logger = logging.getLogger(__name__)
router = APIRouter()


def _notification_list(queries: ScopedQueries, user_id: str) -> NotificationList:
    return NotificationList(
        notifications=list(queries.list_notifications_for_user(user_id)),
        unread_count=queries.unread_notification_count(user_id),
    )


@router.get("/", response_model=NotificationList)
async def list_my_notifications(queries: ScopedQueries = Depends(get_queries)):
    if queries.user_id is None:
        return NotificationList(notifications=[], unread_count=0)
    return _notification_list(queries, queries.user_id)


@router.get("/users/{user_id}", response_model=NotificationList)
async def list_user_notifications(user_id: str, queries: ScopedQueries = Depends(get_queries)):
    """Always empty unless ``user_id`` is the caller"""
    return _notification_list(queries, user_id)


@router.post("/{notification_id}/read", response_model=NotificationReadOut)
async def mark_notification_read(
    notification_id: str,
    queries: ScopedQueries = Depends(get_queries),
    db: Session = Depends(get_db),
):
    request = prepare_mark_notification_read(queries, notification_id)
    if request is None or not apply_mark_notification_read(db, request):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    logger.info(f"Notification {notification_id} marked read by {request.user_id}")
    return NotificationReadOut(id=notification_id, read=True)
