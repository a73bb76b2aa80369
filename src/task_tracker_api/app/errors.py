"""Error taxonomy for the task tracker.

Each error carries the HTTP status code and message it is rendered with, so
the API layer maps them without a lookup table.
"""

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base class for request-terminal task tracker errors."""

    status_code: int = 400
    detail: str = "Bad request"

    def __init__(self, detail: str | None = None) -> None:
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class MethodNotAllowedError(TaskTrackerError):
    status_code = 405
    detail = "Invalid request method"


class InvalidTaskIdError(TaskTrackerError):
    status_code = 400
    detail = "Invalid task ID"


class MalformedBodyError(TaskTrackerError):
    status_code = 400
    detail = "Error parsing request body"


class InvalidStatusError(TaskTrackerError):
    status_code = 400
    detail = "Invalid status field"


class TaskNotFoundError(TaskTrackerError):
    status_code = 404
    detail = "Task not found"
