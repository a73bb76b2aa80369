"""FastAPI application wiring for the task tracker service.

Beginner terms used in this file:
- FastAPI app: the main web application object.
- Route/path operation: a function exposed over HTTP (for example, GET /tasks).
- response_model: Pydantic model used to validate/shape API responses.
- Dependency (Depends): a function FastAPI runs before the route handler.
- app.state: a place to store shared runtime objects (storage, settings).
- Exception handler: turns a raised exception into an HTTP response.
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .app.errors import (
    InvalidTaskIdError,
    MalformedBodyError,
    MethodNotAllowedError,
    TaskTrackerError,
)
from .app.models import DeleteTaskResponse, Task, TaskPayload
from .app.settings import Settings, get_settings
from .app.storage import TaskStore

logger = logging.getLogger(__name__)

# Bodies are decoded by read_task_payload, so document the schema explicitly.
_TASK_BODY_OPENAPI = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": TaskPayload.model_json_schema()}},
    }
}


def create_app(
    *,
    storage: TaskStore | None = None,
    settings_override: Settings | None = None,
) -> FastAPI:
    """Application factory.

    Each call builds a fresh app around its own TaskStore unless one is
    injected, so tests never share task state.
    """
    settings = settings_override or get_settings()

    # No slash redirects: "/tasks/" is an empty id, not an alias for "/tasks".
    app = FastAPI(title=settings.app_name, version="0.1.0", redirect_slashes=False)
    # Shared objects live in app.state so route handlers can reuse them.
    app.state.settings = settings
    app.state.storage = storage if storage is not None else TaskStore()
    _register_exception_handlers(app)

    # Handlers are plain `def`, so the server runs each request on a worker
    # thread; the store lock serializes their access.
    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.get("/tasks", response_model=list[Task])
    def list_tasks() -> list[Task]:
        return app.state.storage.list_all()

    @app.post("/tasks", response_model=Task, status_code=201, openapi_extra=_TASK_BODY_OPENAPI)
    def create_task(payload: TaskPayload = Depends(read_task_payload)) -> Task:
        return app.state.storage.create(
            title=payload.title,
            description=payload.description,
            status=payload.status,
        )

    # `:path` hands every suffix, including "" and "1/extra", to parse_task_id.
    @app.get("/tasks/{task_id:path}", response_model=Task)
    def get_task(task_id: int = Depends(task_id_from_path)) -> Task:
        return app.state.storage.get(task_id)

    @app.put("/tasks/{task_id:path}", response_model=Task, openapi_extra=_TASK_BODY_OPENAPI)
    def update_task(
        task_id: int = Depends(task_id_from_path),
        payload: TaskPayload = Depends(read_task_payload),
    ) -> Task:
        # Any id in the body is ignored; the path id wins.
        return app.state.storage.update(
            task_id,
            title=payload.title,
            description=payload.description,
            status=payload.status,
        )

    @app.delete("/tasks/{task_id:path}", response_model=DeleteTaskResponse)
    def delete_task(task_id: int = Depends(task_id_from_path)) -> DeleteTaskResponse:
        app.state.storage.delete(task_id)
        return DeleteTaskResponse()

    return app


def parse_task_id(raw: str) -> int:
    """Parse a path segment into a positive task id.

    Accepts ASCII digits with an optional leading "+", like a plain decimal
    integer parse; anything else (including "") is an invalid id.
    """
    digits = raw[1:] if raw.startswith("+") else raw
    if not (digits.isascii() and digits.isdigit()):
        raise InvalidTaskIdError()
    task_id = int(digits)
    if task_id < 1:
        raise InvalidTaskIdError()
    return task_id


def task_id_from_path(task_id: str) -> int:
    return parse_task_id(task_id)


async def read_task_payload(request: Request) -> TaskPayload:
    """Decode the raw request body as a TaskPayload, whatever its Content-Type."""
    raw_body = await request.body()
    try:
        return TaskPayload.model_validate_json(raw_body)
    except ValueError as exc:
        # ValidationError and UnicodeDecodeError are both ValueErrors.
        logger.info(
            "request_rejected reason=malformed_body method=%s path=%s error=%s",
            request.method,
            request.url.path,
            type(exc).__name__,
        )
        raise MalformedBodyError() from exc


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskTrackerError)
    async def handle_task_tracker_error(_request: Request, exc: TaskTrackerError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    # Routing rejects unsupported verbs before any path or body parsing.
    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == MethodNotAllowedError.status_code:
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": MethodNotAllowedError.detail},
                headers=exc.headers,
            )
        return await http_exception_handler(request, exc)


def run() -> None:
    """Console entry point: configure logging and serve on the configured port."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logger.info("Server is running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


# Module-level app for `uvicorn task_tracker_api.main:app`.
app = create_app()


if __name__ == "__main__":
    run()
