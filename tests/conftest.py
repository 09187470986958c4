import json
import logging
from typing import Any, Callable, Dict, List

import httpx
import pytest

from opstrails_track_event.workflow import clear_secrets

SUCCESS_BODY = {
    "success": True,
    "data": {"id": "evt_123", "time": "2025-01-01T00:00:00Z"},
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _reset_secrets():
    clear_secrets()
    yield
    clear_secrets()


@pytest.fixture
def restore_logging():
    """Undo the root logger changes made by configure_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.NOTSET)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def sent_event(self) -> Dict[str, Any]:
        return json.loads(self.requests[0].content)


def respond(status_code: int = 200, body: Any = None) -> Callable[[httpx.Request], httpx.Response]:
    payload = SUCCESS_BODY if body is None else body
    return lambda request: httpx.Response(status_code, json=payload)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport(respond())
