"""Notification endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from api.dependencies import DashboardControllerDep
from models.notification import Notification


router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


class NotificationListResponse(BaseModel):
    """Response model for the notification list.

    Attributes:
        notifications: Recent notifications, oldest first.
        total_count: Number of notifications returned.
    """

    notifications: list[Notification]
    total_count: int


@router.get("", response_model=NotificationListResponse)
async def list_notifications(controller: DashboardControllerDep):
    """List recent notifications."""
    notifications = controller.notifications
    return NotificationListResponse(
        notifications=notifications, total_count=len(notifications)
    )


@router.delete("", response_model=NotificationListResponse)
async def clear_notifications(controller: DashboardControllerDep):
    """Dismiss every notification."""
    controller.clear_notifications()
    return NotificationListResponse(notifications=[], total_count=0)
