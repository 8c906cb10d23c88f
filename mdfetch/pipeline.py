"""Fetch-and-format pipeline — URL in, Markdown (or an error message) out.

``fetch_and_format`` orchestrates one request:

    validate URL → fetch → normalise (per mode) → format as Markdown

The ``external_api`` mode skips the fetch and normalise steps and hands the
URL to the external formatter instead.  Every expected failure is turned
into a failed :class:`ConversionResult` carrying a user-facing message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx
from pydantic import HttpUrl, TypeAdapter, ValidationError

from mdfetch.llm.formatter import format_to_markdown, format_with_external_api
from mdfetch.llm.provider import FormatterError
from mdfetch.scraper.fetcher import FetchError, extract_title, fetch_url
from mdfetch.scraper.models import ProcessingMode
from mdfetch.scraper.normalizer import normalize

logger = logging.getLogger(__name__)

_url_adapter = TypeAdapter(HttpUrl)

INVALID_URL_MESSAGE = "Please enter a valid URL."
CONNECT_FAILED_MESSAGE = (
    "Could not connect to the URL. Please check the URL and your internet connection."
)


@dataclass
class ConversionResult:
    """Outcome of one fetch-and-format request."""

    success: bool
    mode: ProcessingMode
    markdown: str | None = None
    error: str | None = None
    submitted_url: str | None = None
    title: str = ""
    failed_stage: str | None = None


def validate_url(url: str) -> str | None:
    """Return *url* if it is an absolute http(s) URL, else ``None``."""
    url = (url or "").strip()
    try:
        _url_adapter.validate_python(url)
    except ValidationError:
        return None
    return url


def _failed(mode: ProcessingMode, url: str | None, stage: str, message: str) -> ConversionResult:
    return ConversionResult(
        success=False,
        mode=mode,
        error=message,
        submitted_url=url,
        failed_stage=stage,
    )


def _local_content(html: str, content_type: str, mode: ProcessingMode) -> str:
    """Normalise *html*, stripping the full page when body extraction is pointless."""
    if mode is ProcessingMode.EXTRACT_BODY_STRIP_TAGS and "text/html" not in content_type.lower():
        if content_type:
            logger.warning(
                "Content type is %s, not text/html; stripping tags from the full content.",
                content_type,
            )
        else:
            logger.warning(
                "Content type not specified; stripping tags from the full content."
            )
        return normalize(html, ProcessingMode.FULL_PAGE_STRIP_TAGS)
    return normalize(html, mode)


def fetch_and_format(
    url: str,
    mode: ProcessingMode | str = ProcessingMode.EXTRACT_BODY_STRIP_TAGS,
) -> ConversionResult:
    """Fetch *url* and convert it to Markdown according to *mode*.

    Args:
        url: The page to convert.  Must be an absolute http(s) URL.
        mode: A :class:`ProcessingMode` or its string value.

    Returns:
        A :class:`ConversionResult`; ``success`` is ``False`` and ``error``
        holds a user-facing message when validation, fetching or formatting
        fails.
    """
    mode = ProcessingMode(mode)

    validated = validate_url(url)
    if validated is None:
        return _failed(mode, None, "validation", INVALID_URL_MESSAGE)

    # ------------------------------------------------------------------
    # External API — normaliser bypassed
    # ------------------------------------------------------------------
    if mode is ProcessingMode.EXTERNAL_API:
        try:
            markdown = format_with_external_api(validated)
        except FormatterError as exc:
            logger.warning("External formatting of %s failed: %s", validated, exc)
            return _failed(mode, validated, "format", str(exc))
        return ConversionResult(
            success=True, mode=mode, markdown=markdown, submitted_url=validated
        )

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------
    try:
        raw = fetch_url(validated)
    except httpx.HTTPStatusError as exc:
        resp = exc.response
        message = f"Failed to fetch URL: {resp.status_code} {resp.reason_phrase}".rstrip()
        logger.warning("Fetching %s failed: %s", validated, message)
        return _failed(mode, validated, "fetch", message)
    except httpx.RequestError:
        logger.exception("Could not connect to %s", validated)
        return _failed(mode, validated, "fetch", CONNECT_FAILED_MESSAGE)
    except FetchError as exc:
        logger.warning("Fetched content of %s rejected: %s", validated, exc)
        return _failed(mode, validated, "fetch", str(exc))

    # ------------------------------------------------------------------
    # Normalise + format
    # ------------------------------------------------------------------
    content = _local_content(raw.html, raw.content_type, mode)
    try:
        markdown = format_to_markdown(validated, content, mode)
    except FormatterError as exc:
        logger.exception("Formatting %s failed", validated)
        return _failed(mode, validated, "format", str(exc))

    return ConversionResult(
        success=True,
        mode=mode,
        markdown=markdown,
        submitted_url=validated,
        title=extract_title(raw.html),
    )
