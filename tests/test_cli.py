"""Tests for the mdfetch CLI commands."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from cli.main import app
from mdfetch.pipeline import ConversionResult
from mdfetch.scraper.models import ProcessingMode

runner = CliRunner()


@pytest.fixture
def page(tmp_path):
    """A small HTML document on disk."""
    path = tmp_path / "page.html"
    path.write_text(
        "<html><head><title>T</title></head>"
        "<body><p>Hello</p><script>x()</script><p>World</p></body></html>",
        encoding="utf-8",
    )
    return path


def test_normalize_file(page):
    result = runner.invoke(app, ["normalize", str(page)])
    assert result.exit_code == 0
    assert "Hello\n\nWorld" in result.output
    assert "x()" not in result.output


def test_normalize_full_page_mode(page):
    result = runner.invoke(app, ["normalize", str(page), "--mode", "full_page_strip_tags"])
    assert result.exit_code == 0
    assert "T" in result.output


def test_normalize_stdin():
    result = runner.invoke(app, ["normalize", "-"], input="A&nbsp;B<hr>C")
    assert result.exit_code == 0
    assert "A B\n\n---\n\nC" in result.output


def test_normalize_missing_file(tmp_path):
    result = runner.invoke(app, ["normalize", str(tmp_path / "nope.html")])
    assert result.exit_code == 1


def test_normalize_external_mode_rejected(page):
    result = runner.invoke(app, ["normalize", str(page), "--mode", "external_api"])
    assert result.exit_code == 1


def test_convert_prints_markdown():
    fake = ConversionResult(
        success=True,
        mode=ProcessingMode.EXTRACT_BODY_STRIP_TAGS,
        markdown="# Converted",
        submitted_url="https://example.com/",
        title="Example",
    )
    with patch("mdfetch.pipeline.fetch_and_format", return_value=fake) as run:
        result = runner.invoke(app, ["convert", "https://example.com/"])

    assert result.exit_code == 0
    assert "# Converted" in result.output
    run.assert_called_once_with("https://example.com/", ProcessingMode.EXTRACT_BODY_STRIP_TAGS)


def test_convert_writes_output_file(tmp_path):
    fake = ConversionResult(
        success=True,
        mode=ProcessingMode.FULL_PAGE_AI_HANDLES_HTML,
        markdown="# Saved",
        submitted_url="https://example.com/",
    )
    out = tmp_path / "out.md"
    with patch("mdfetch.pipeline.fetch_and_format", return_value=fake):
        result = runner.invoke(
            app,
            ["convert", "https://example.com/", "-m", "full_page_ai_handles_html", "-o", str(out)],
        )

    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8") == "# Saved"


def test_convert_failure_exits_1():
    fake = ConversionResult(
        success=False,
        mode=ProcessingMode.EXTRACT_BODY_STRIP_TAGS,
        error="Please enter a valid URL.",
        failed_stage="validation",
    )
    with patch("mdfetch.pipeline.fetch_and_format", return_value=fake):
        result = runner.invoke(app, ["convert", "bad"])

    assert result.exit_code == 1
    assert "Please enter a valid URL." in result.output


def test_chat_repl(tmp_path):
    doc = tmp_path / "doc.md"
    doc.write_text("# Cats\n\nCats purr.", encoding="utf-8")

    with patch("mdfetch.llm.chat.chat_reply", return_value="They purr.") as reply:
        result = runner.invoke(
            app, ["chat", "--context", str(doc)], input="What do cats do?\n/quit\n"
        )

    assert result.exit_code == 0
    assert "assistant> They purr." in result.output
    reply.assert_called_once_with("What do cats do?", [], "# Cats\n\nCats purr.")


def test_chat_reset_clears_history():
    replies = iter(["first", "second"])
    calls = []

    def _fake_reply(question, history, markdown):
        calls.append(list(history))
        return next(replies)

    with patch("mdfetch.llm.chat.chat_reply", side_effect=_fake_reply):
        result = runner.invoke(app, ["chat"], input="one\n/reset\ntwo\n")

    assert result.exit_code == 0
    assert "Transcript cleared." in result.output
    assert calls == [[], []]


def test_chat_missing_context(tmp_path):
    result = runner.invoke(app, ["chat", "--context", str(tmp_path / "none.md")])
    assert result.exit_code == 1


def test_serve_runs_uvicorn_with_configured_log_level(monkeypatch):
    monkeypatch.setattr("mdfetch.config.settings.log_level", "WARNING")
    with patch("uvicorn.run") as run:
        result = runner.invoke(app, ["serve", "--port", "9000"])

    assert result.exit_code == 0
    run.assert_called_once_with(
        "mdfetch.api.app:app",
        host="127.0.0.1",
        port=9000,
        reload=False,
        log_level="warning",
    )
