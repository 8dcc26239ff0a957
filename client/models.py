"""Payload models for backend responses.

The dashboard payload is only validated at the container level: individual
records stay raw dictionaries so that one malformed record can be dropped
by the normalizer without rejecting the whole response.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class TaskPayload(BaseModel):
    """A task as returned inside the dashboard payload.

    Attributes:
        id: Task identifier.
        title: Task title.
        description: Task description.
        due_date: When the task is due.
        completed: Whether the task is done.
        source: Owning subsystem ("team", "study-group" or "personal").
        source_id: Id of the owning team or group.
        source_name: Display name of the owner.
        status: Free-form backend status.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    title: str
    description: str = ""
    due_date: datetime = Field(alias="dueDate")
    completed: bool = False
    source: str = "personal"
    source_id: Optional[str] = Field(default=None, alias="sourceId")
    source_name: Optional[str] = Field(default=None, alias="sourceName")
    status: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Backend ids may be numeric."""
        return str(v) if isinstance(v, int) else v

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Any) -> Any:
        return v or ""


class DashboardPayload(BaseModel):
    """Response of ``GET /api/dashboard``.

    Attributes:
        tasks: Raw task records.
        events: Raw personal event records.
        teams: Raw teams, each embedding a ``meetings`` list.
        study_groups: Raw study groups, each embedding a ``meetings`` list.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tasks: list[Any] = Field(default_factory=list)
    events: list[Any] = Field(default_factory=list)
    teams: list[Any] = Field(default_factory=list)
    study_groups: list[Any] = Field(default_factory=list, alias="studyGroups")

    @field_validator("tasks", "events", "teams", "study_groups", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        """Treat null collections as empty."""
        return [] if v is None else v
