from __future__ import annotations

import os
import socket
import subprocess
import sys
import time
from collections.abc import Iterator
from pathlib import Path

import httpx
import pytest

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


def _free_local_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def _is_healthy(client: httpx.Client) -> bool:
    try:
        return client.get("/health").status_code == 200
    except httpx.TransportError:
        return False


@pytest.fixture
def api(tmp_path: Path) -> Iterator[httpx.Client]:
    """Client bound to a freshly started uvicorn process serving the app."""
    if os.getenv("RUN_SERVER_INTEGRATION_TESTS") != "1":
        pytest.skip("Set RUN_SERVER_INTEGRATION_TESTS=1 to run tests against a live server.")

    port = _free_local_port()
    python_path = os.pathsep.join(filter(None, [str(SRC_DIR), os.getenv("PYTHONPATH")]))
    env = {**os.environ, "PYTHONPATH": python_path}
    server = subprocess.Popen(  # noqa: S603
        [sys.executable, "-m", "uvicorn", "task_tracker_api.main:app", "--port", str(port)],
        cwd=tmp_path,
        env=env,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    client = httpx.Client(base_url=f"http://127.0.0.1:{port}", timeout=10.0)
    try:
        deadline = time.monotonic() + 20.0
        while not _is_healthy(client):
            if time.monotonic() > deadline or server.poll() is not None:
                pytest.fail("task tracker server did not become healthy")
            time.sleep(0.2)
        yield client
    finally:
        client.close()
        server.terminate()
        server.wait(timeout=10)
