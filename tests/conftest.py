from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from task_tracker_api.app.settings import Settings
from task_tracker_api.app.storage import TaskStore
from task_tracker_api.main import create_app


@pytest.fixture
def storage() -> TaskStore:
    return TaskStore()


@pytest.fixture
def client(storage: TaskStore) -> Iterator[TestClient]:
    app = create_app(storage=storage, settings_override=Settings(app_name="task-tracker-test"))
    with TestClient(app) as test_client:
        yield test_client
