import logging

import httpx
import pytest
from fastapi import FastAPI

from summarizer.http_logging import HttpLoggingMiddleware, install_http_logging


def make_app() -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    return app


@pytest.mark.asyncio
async def test_middleware_logs_one_line_per_request(caplog: pytest.LogCaptureFixture):
    app = make_app()
    app.add_middleware(HttpLoggingMiddleware)

    with caplog.at_level(logging.INFO, logger="summarizer.http"):
        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        ) as client:
            resp = await client.get("/ping", headers={"X-Request-ID": "req-123"})

    assert resp.status_code == 200
    records = [r for r in caplog.records if r.name == "summarizer.http"]
    assert len(records) == 1
    message = records[0].getMessage()
    assert message.startswith("req-123 GET /ping status=200")


def test_install_http_logging_is_opt_in(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("SUMMARIZER_HTTP_LOG", raising=False)
    app = make_app()
    install_http_logging(app)
    assert not any(m.cls is HttpLoggingMiddleware for m in app.user_middleware)

    monkeypatch.setenv("SUMMARIZER_HTTP_LOG", "1")
    install_http_logging(app)
    assert any(m.cls is HttpLoggingMiddleware for m in app.user_middleware)
