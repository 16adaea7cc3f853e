"""Pydantic schemas for tasks: create/update input, API output, and the allowed status/priority values."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Status is an open set: add a value here to allow it everywhere.
TASK_STATUS_VALUES: frozenset[str] = frozenset({"todo", "in-progress", "completed"})
DEFAULT_TASK_STATUS = "todo"
COMPLETED_TASK_STATUS = "completed"

Priority = Literal["LOW", "MEDIUM", "HIGH"]

PRIORITY_VALUES: frozenset[str] = frozenset({"LOW", "MEDIUM", "HIGH"})

TITLE_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 10_000


def _validate_status(value: str) -> str:
    """Ensure status is one of the allowed values."""
    normalized = value.strip().lower()
    if normalized not in TASK_STATUS_VALUES:
        raise ValueError(
            f"status must be one of {sorted(TASK_STATUS_VALUES)}, got {value!r}"
        )
    return normalized


def _validate_title(value: str) -> str:
    if not value.strip():
        raise ValueError("title must be non-empty")
    return value.strip()


def is_valid_priority(value: str) -> bool:
    return value in PRIORITY_VALUES


class CamelModel(BaseModel):
    """Serializes as camelCase (userId, dueDate, ...); accepts camelCase or snake_case input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TaskCreate(CamelModel):
    """Body for POST /tasks."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: str = Field(default=DEFAULT_TASK_STATUS, description="todo, in-progress or completed")
    priority: Priority = Field(default="MEDIUM")
    due_date: datetime | None = Field(default=None, description="ISO 8601 date-time")
    category_id: int | None = Field(default=None, gt=0)
    completed: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _validate_title(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _validate_status(v)


class TaskUpdate(CamelModel):
    """
    Body for PUT /tasks/{id}. Partial: only fields present in the body are applied.

    description, due_date and category_id may be set to null to clear them;
    title, status, priority and completed may not.
    """

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    status: str | None = None
    priority: Priority | None = None
    due_date: datetime | None = None
    category_id: int | None = Field(default=None, gt=0)
    completed: bool | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return _validate_title(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("status cannot be null")
        return _validate_status(v)

    @field_validator("priority", "completed")
    @classmethod
    def validate_not_null(cls, v: object) -> object:
        if v is None:
            raise ValueError("value cannot be null")
        return v

    def changes(self) -> dict[str, object]:
        """Fields explicitly sent in the request, by attribute name."""
        return self.model_dump(exclude_unset=True)


class TaskResponse(CamelModel):
    """A task as returned by the API."""

    id: int
    user_id: int
    category_id: int | None = None
    title: str
    description: str | None = None
    status: str
    priority: str
    due_date: datetime | None = None
    completed: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TaskMutationResponse(BaseModel):
    """Response for task create/update."""

    message: str
    task: TaskResponse


class CompletionRequest(BaseModel):
    """Body for PATCH /tasks/{id}/completion."""

    completed: bool


class CompletionResponse(BaseModel):
    message: str = "Task completion updated"
    completed: bool


class MessageResponse(BaseModel):
    message: str
