"""Dashboard layout endpoints.

The widget layout is cached locally together with the timer configuration.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from api.dependencies import DashboardControllerDep
from models.preferences import LayoutItem


router = APIRouter(
    prefix="/layout",
    tags=["layout"],
)


class LayoutResponse(BaseModel):
    """Response model for the dashboard layout.

    Attributes:
        layout: Widget positions.
    """

    layout: list[LayoutItem]


class SaveLayoutRequest(BaseModel):
    """Request model for saving the dashboard layout."""

    layout: list[LayoutItem]


@router.get("", response_model=LayoutResponse)
async def get_layout(controller: DashboardControllerDep):
    """Get the current widget layout."""
    return LayoutResponse(layout=controller.layout)


@router.put("", response_model=LayoutResponse)
async def save_layout(request: SaveLayoutRequest, controller: DashboardControllerDep):
    """Replace the widget layout and cache it locally."""
    return LayoutResponse(layout=controller.save_layout(request.layout))
