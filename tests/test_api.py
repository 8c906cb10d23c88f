"""Tests for the HTTP API (conversion, normalisation, chat, health).

The pipeline and the chat stream are patched where the routers import them,
so no network or LLM access is required.
"""

from __future__ import annotations

import json
from typing import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from mdfetch.api.app import create_app
from mdfetch.pipeline import ConversionResult
from mdfetch.scraper.models import ProcessingMode


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _fake_chat_stream(*args, **kwargs):
    """Minimal async generator that emits one token and done."""
    yield 'data: {"event": "token", "text": "Hello"}\n\n'
    yield 'data: {"event": "done"}\n\n'


def _parse_sse(content: bytes) -> list[dict]:
    """Parse raw SSE response bytes into a list of event dicts."""
    events = []
    for line in content.decode().splitlines():
        line = line.strip()
        if line.startswith("data: "):
            events.append(json.loads(line[len("data: "):]))
    return events


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    with TestClient(create_app()) as c:
        yield c


# ---------------------------------------------------------------------------
# /healthz
# ---------------------------------------------------------------------------

def test_healthz(client: TestClient) -> None:
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_create_app_leaves_logging_alone() -> None:
    with patch("logging.basicConfig") as basic_config:
        create_app()

    basic_config.assert_not_called()


# ---------------------------------------------------------------------------
# /convert
# ---------------------------------------------------------------------------

class TestConvert:
    def test_success(self, client: TestClient) -> None:
        result = ConversionResult(
            success=True,
            mode=ProcessingMode.FULL_PAGE_STRIP_TAGS,
            markdown="# Hello",
            submitted_url="https://example.com/",
            title="Hello page",
        )
        with patch("mdfetch.api.routers.convert.fetch_and_format", return_value=result) as run:
            resp = client.post(
                "/convert",
                json={"url": "https://example.com/", "mode": "full_page_strip_tags"},
            )

        assert resp.status_code == 200
        assert resp.json() == {
            "markdown": "# Hello",
            "submitted_url": "https://example.com/",
            "mode": "full_page_strip_tags",
            "title": "Hello page",
        }
        run.assert_called_once_with("https://example.com/", ProcessingMode.FULL_PAGE_STRIP_TAGS)

    def test_default_mode_is_extract_body(self, client: TestClient) -> None:
        result = ConversionResult(
            success=True,
            mode=ProcessingMode.EXTRACT_BODY_STRIP_TAGS,
            markdown="x",
            submitted_url="https://example.com/",
        )
        with patch("mdfetch.api.routers.convert.fetch_and_format", return_value=result) as run:
            client.post("/convert", json={"url": "https://example.com/"})

        assert run.call_args.args[1] is ProcessingMode.EXTRACT_BODY_STRIP_TAGS

    def test_unknown_mode_rejected(self, client: TestClient) -> None:
        resp = client.post("/convert", json={"url": "https://example.com/", "mode": "magic"})
        assert resp.status_code == 422

    def test_invalid_url_is_422(self, client: TestClient) -> None:
        resp = client.post("/convert", json={"url": "not-a-url"})
        assert resp.status_code == 422
        assert resp.json()["detail"] == "Please enter a valid URL."

    def test_fetch_failure_is_502(self, client: TestClient) -> None:
        result = ConversionResult(
            success=False,
            mode=ProcessingMode.EXTRACT_BODY_STRIP_TAGS,
            error="Failed to fetch URL: 500 Internal Server Error",
            submitted_url="https://example.com/",
            failed_stage="fetch",
        )
        with patch("mdfetch.api.routers.convert.fetch_and_format", return_value=result):
            resp = client.post("/convert", json={"url": "https://example.com/"})

        assert resp.status_code == 502
        assert resp.json()["detail"] == "Failed to fetch URL: 500 Internal Server Error"


# ---------------------------------------------------------------------------
# /normalize
# ---------------------------------------------------------------------------

class TestNormalize:
    def test_strips_body(self, client: TestClient) -> None:
        resp = client.post(
            "/normalize",
            json={"html": "<body><p>Hello</p><p>World</p></body>"},
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "text": "Hello\n\nWorld",
            "mode": "extract_body_strip_tags",
            "empty": False,
        }

    def test_ai_mode_passthrough(self, client: TestClient) -> None:
        html = "<html><body><p>x</p></body></html>"
        resp = client.post("/normalize", json={"html": html, "mode": "full_page_ai_handles_html"})
        assert resp.json()["text"] == html

    def test_empty_flag(self, client: TestClient) -> None:
        resp = client.post("/normalize", json={"html": "<div></div>", "mode": "full_page_strip_tags"})
        assert resp.json()["empty"] is True

    def test_external_api_rejected(self, client: TestClient) -> None:
        resp = client.post("/normalize", json={"html": "<p>x</p>", "mode": "external_api"})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# /chat
# ---------------------------------------------------------------------------

class TestChat:
    def test_streams_sse(self, client: TestClient) -> None:
        with patch("mdfetch.api.routers.chat.chat_stream", side_effect=_fake_chat_stream) as stream:
            resp = client.post(
                "/chat",
                json={
                    "message": "What is this?",
                    "history": [{"role": "user", "content": "hi"}],
                    "markdown": "# Doc",
                },
            )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        assert _parse_sse(resp.content) == [
            {"event": "token", "text": "Hello"},
            {"event": "done"},
        ]
        stream.assert_called_once_with(
            "What is this?", [{"role": "user", "content": "hi"}], "# Doc"
        )

    def test_empty_message_rejected(self, client: TestClient) -> None:
        resp = client.post("/chat", json={"message": ""})
        assert resp.status_code == 422
