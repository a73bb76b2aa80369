"""Pydantic models shared by the API layer and the task store.

Beginner terms used in this file:
- Model: a typed schema class used for validation/serialization.
- Literal: restricts a field to a fixed set of allowed string values.
- frozen: instances cannot be mutated after construction.
"""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Task lifecycle states accepted on write and returned on read.
TaskStatus = Literal["pending", "completed"]
VALID_STATUSES: frozenset[str] = frozenset(get_args(TaskStatus))


class Task(BaseModel):
    """Canonical task record shape returned by API/storage."""

    # Stored records are replaced, never mutated, so callers can't alias store state.
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    title: str
    description: str
    status: TaskStatus


class TaskPayload(BaseModel):
    """Request body for POST /tasks and PUT /tasks/{id}.

    Missing string fields decode to "" so an absent status is reported as an
    invalid status rather than a malformed body. Status stays a plain string
    here; the store owns the enum check.
    """

    model_config = ConfigDict(extra="ignore")

    # Accepted for shape compatibility with Task; the store assigns/keeps ids.
    id: int | None = None
    title: str = ""
    description: str = ""
    status: str = ""

    @field_validator("title", "description", "status", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        # JSON null leaves the field at its zero value.
        return "" if value is None else value


class DeleteTaskResponse(BaseModel):
    """Response body for DELETE /tasks/{id}."""

    message: str = "Task deleted successfully"
