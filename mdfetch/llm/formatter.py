"""Markdown formatting collaborators.

Two implementations share the :class:`FormatterError` failure type:

``format_to_markdown``
    Local LLM prompt over the normalised text (or raw HTML for
    ``full_page_ai_handles_html``).

``format_with_external_api``
    Used by the ``external_api`` mode.  The URL itself is POSTed to
    ``EXTERNAL_API_URL``, which fetches and formats the page on its own and
    answers with ``{"markdown": "..."}``.
"""

from __future__ import annotations

import logging

import httpx

from mdfetch.config import settings
from mdfetch.llm.provider import FormatterError, get_llm, message_text
from mdfetch.scraper.models import ProcessingMode

logger = logging.getLogger(__name__)


_SYSTEM_PROMPT = (
    "You are an expert in formatting content into Markdown. "
    "Return only the Markdown document, without commentary or code fences "
    "around it."
)

_MODE_INSTRUCTIONS: dict[ProcessingMode, str] = {
    ProcessingMode.EXTRACT_BODY_STRIP_TAGS: (
        "The content is plain text taken from the page <body> with its HTML "
        "tags removed. Blank lines mark former block boundaries. Infer "
        "headings, lists, tables and paragraphs from the text."
    ),
    ProcessingMode.FULL_PAGE_STRIP_TAGS: (
        "The content is plain text taken from the whole page with its HTML "
        "tags removed, so it may include navigation and footer text. Infer "
        "headings, lists, tables and paragraphs, and drop obvious "
        "boilerplate."
    ),
    ProcessingMode.FULL_PAGE_AI_HANDLES_HTML: (
        "The content is the raw HTML of the whole page. Extract the main "
        "content, discard navigation, ads, scripts and other boilerplate, "
        "and convert the remaining structure to Markdown."
    ),
}


def build_messages(url: str, content: str, mode: ProcessingMode | str) -> list:
    """Return the LangChain message list for one formatting request."""
    from langchain_core.messages import HumanMessage, SystemMessage

    mode = ProcessingMode(mode)
    instruction = _MODE_INSTRUCTIONS.get(mode)
    if instruction is None:
        raise ValueError(f"Processing mode {mode.value!r} is not formatted locally.")

    human = (
        f"Source URL: {url}\n"
        f"Processing mode: {mode.value}\n\n"
        "Please format the following content into Markdown:\n\n"
        f"Content: {content}"
    )
    return [SystemMessage(content=f"{_SYSTEM_PROMPT}\n\n{instruction}"), HumanMessage(content=human)]


def format_to_markdown(url: str, content: str, mode: ProcessingMode | str) -> str:
    """Ask the configured LLM to turn *content* into Markdown.

    Raises:
        FormatterError: If the model call fails.
    """
    messages = build_messages(url, content, mode)
    try:
        llm = get_llm()
        response = llm.invoke(messages)
    except Exception as exc:
        raise FormatterError(f"Markdown formatting failed: {exc}") from exc

    markdown = message_text(response).strip()
    if not markdown:
        logger.warning("Formatter returned an empty document for %s", url)
    return markdown


def format_with_external_api(url: str) -> str:
    """Delegate fetch + formatting of *url* to the external HTTP endpoint.

    Raises:
        FormatterError: If the endpoint is not configured, answers with an
            error status, or returns an unexpected payload.
    """
    endpoint = settings.external_api_url
    if not endpoint:
        raise FormatterError(
            "External API is not configured. Set EXTERNAL_API_URL or choose a "
            "local processing mode."
        )

    try:
        with httpx.Client(timeout=settings.external_api_timeout) as client:
            response = client.post(endpoint, json={"url": url})
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPStatusError as exc:
        raise FormatterError(
            f"External API error: {exc.response.status_code} {exc.response.reason_phrase}"
        ) from exc
    except httpx.RequestError as exc:
        raise FormatterError(f"Could not reach the external API: {exc}") from exc
    except ValueError as exc:
        raise FormatterError("External API returned invalid JSON.") from exc

    markdown = payload.get("markdown") if isinstance(payload, dict) else None
    if not isinstance(markdown, str):
        raise FormatterError("External API response did not contain Markdown.")
    return markdown.strip()
