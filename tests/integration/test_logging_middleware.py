import logging
import pytest
import sys
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from unittest.mock import patch

from eduplay.middleware.logging_middleware import LoggingMiddleware

pytestmark = pytest.mark.integration

BODY = b'{"grade":"1st"}'


@pytest.fixture
def client():
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)

    @app.post("/echo")
    async def echo(request: Request):
        return {"received": (await request.body()).decode(errors="replace")}

    return TestClient(app)


def _lines(caplog):
    return [r.getMessage() for r in caplog.records if r.name == "eduplay.middleware.logging_middleware"]


class TestLoggingMiddleware:

    def test_silent_without_debug_mode(self, client, caplog):
        with patch.object(sys.modules['eduplay.config'], 'DEBUG_MODE', False), caplog.at_level(logging.INFO):
            response = client.post("/echo", content=BODY, headers={"content-type": "application/json"})

        assert response.json() == {"received": '{"grade":"1st"}'}
        assert _lines(caplog) == []

    def test_logs_request_and_response(self, client, caplog):
        with patch.object(sys.modules['eduplay.config'], 'DEBUG_MODE', True), caplog.at_level(logging.INFO):
            response = client.post("/echo", content=BODY, headers={"content-type": "application/json"})

        assert response.json() == {"received": '{"grade":"1st"}'}
        request_line, response_line = _lines(caplog)
        assert request_line.startswith("--> POST http://testserver/echo")
        assert '{"grade":"1st"}' in request_line
        assert response_line.startswith("<-- 200 POST /echo")

    def test_binary_upload_is_logged_by_size(self, client, caplog):
        with patch.object(sys.modules['eduplay.config'], 'DEBUG_MODE', True), caplog.at_level(logging.INFO):
            client.post("/echo", content=b"\x89PNG....", headers={"content-type": "image/png"})

        assert "<8 bytes of image/png>" in _lines(caplog)[0]
