"""Event and task endpoints.

These endpoints expose the aggregated event collection and the personal
event commands of the DashboardController.
"""

from datetime import date
from typing import Optional, Union

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel

from api.dependencies import DashboardControllerDep
from api.models import EventCommandResponse, EventListResponse
from client.models import TaskPayload
from models.aggregator import EventFilter
from models.event import EventOrigin, PersonalEventDraft


router = APIRouter(
    tags=["events"],
)


class TaskListResponse(BaseModel):
    """Response model for the task list.

    Attributes:
        tasks: Tasks from the last refresh.
        total_count: Number of tasks returned.
    """

    tasks: list[TaskPayload]
    total_count: int


# Route Handlers


@router.get("/events", response_model=EventListResponse)
async def list_events(
    controller: DashboardControllerDep,
    on_date: Optional[date] = Query(default=None, description="Day-level view"),
    include_cleared: bool = Query(default=False, description="Include cleared events"),
    origin: Optional[EventOrigin] = Query(default=None),
    completed: Optional[bool] = Query(default=None),
):
    """List aggregated events, ordered by start.

    Cleared events are hidden unless include_cleared is set or a day is
    requested with on_date, in which case every event of that day is listed.
    """
    event_filter = EventFilter(
        exclude_cleared=not include_cleared,
        on_date=on_date,
        origin=origin,
        completed=completed,
    )
    events = controller.events(event_filter)
    return EventListResponse.build(events, controller.aggregator.version)


@router.post("/events/refresh", response_model=EventListResponse)
async def refresh_events(controller: DashboardControllerDep):
    """Reload every event source from the backend."""
    events = await controller.refresh()
    if events is None:
        return EventListResponse.build([], controller.aggregator.version, status="ignored")
    return EventListResponse.build(events, controller.aggregator.version)


@router.post(
    "/events", response_model=EventCommandResponse, status_code=status.HTTP_201_CREATED
)
async def create_event(draft: PersonalEventDraft, controller: DashboardControllerDep):
    """Create a personal event."""
    event = await controller.add_event(draft)
    if event is None:
        return EventCommandResponse(status="ignored", message="An identical add is in progress")
    return EventCommandResponse(status="ok", event=event, message="Event added")


@router.post("/events/{event_id}/complete", response_model=EventCommandResponse)
async def complete_event(event_id: str, controller: DashboardControllerDep):
    """Mark a personal event as completed."""
    event = await controller.complete_event(event_id)
    if event is None:
        return EventCommandResponse(status="ignored", message="Already in progress")
    return EventCommandResponse(status="ok", event=event, message="Event completed")


@router.post("/events/{event_id}/clear", response_model=EventCommandResponse)
async def clear_event(event_id: str, controller: DashboardControllerDep):
    """Clear a personal event from the calendar; it stays in day views."""
    event = await controller.clear_event(event_id)
    if event is None:
        return EventCommandResponse(status="ignored", message="Already in progress")
    return EventCommandResponse(status="ok", event=event, message="Event cleared")


@router.post("/events/{event_id}/unclear", response_model=EventCommandResponse)
async def unclear_event(event_id: str, controller: DashboardControllerDep):
    """Restore a cleared personal event."""
    event = await controller.unclear_event(event_id)
    if event is None:
        return EventCommandResponse(status="ignored", message="Already in progress")
    return EventCommandResponse(status="ok", event=event, message="Event restored")


@router.delete("/events/{event_id}", response_model=EventCommandResponse)
async def delete_event(event_id: str, controller: DashboardControllerDep):
    """Permanently delete a personal event."""
    deleted = await controller.delete_event(event_id)
    if not deleted:
        return EventCommandResponse(status="ignored", message="Already in progress")
    return EventCommandResponse(status="ok", message="Event deleted")


@router.get("/tasks", response_model=TaskListResponse)
async def list_tasks(
    controller: DashboardControllerDep,
    task_filter: str = Query(
        default="all",
        alias="filter",
        description="all, completed, pending, or an origin (team, study-group, personal)",
    ),
):
    """List tasks from the last refresh.

    Raises:
        HTTPException: If the filter is not recognized.
    """
    selected: Union[str, EventOrigin] = task_filter
    if task_filter not in ("all", "completed", "pending"):
        try:
            selected = EventOrigin(task_filter)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Unknown task filter '{task_filter}'",
            )
    tasks = controller.tasks(selected)
    return TaskListResponse(tasks=tasks, total_count=len(tasks))


@router.post("/tasks/{task_id}/toggle", response_model=EventListResponse)
async def toggle_task(task_id: str, controller: DashboardControllerDep):
    """Toggle a task's completion and return the refreshed events.

    Raises:
        HTTPException: If the task is not part of the last refresh.
    """
    try:
        events = await controller.toggle_task(task_id)
    except KeyError:
        raise HTTPException(
            status_code=404,
            detail=f"Task '{task_id}' not found",
        )
    if events is None:
        return EventListResponse.build([], controller.aggregator.version, status="ignored")
    return EventListResponse.build(events, controller.aggregator.version)
