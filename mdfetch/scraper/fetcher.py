"""Single-shot HTTP fetcher for the page that will be converted."""

from __future__ import annotations

import logging
import re

import httpx

from mdfetch.config import settings
from mdfetch.scraper.models import RawPage

logger = logging.getLogger(__name__)

_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"

_TITLE_RE = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)


class FetchError(RuntimeError):
    """The page was fetched but cannot be processed (too large, empty)."""


def _too_large_message() -> str:
    limit_mb = settings.max_content_bytes / (1024 * 1024)
    return f"Content too large to process (max {limit_mb:g}MB)."


def extract_title(html: str) -> str:
    """Return the text content of the first ``<title>`` tag, or empty string."""
    match = _TITLE_RE.search(html)
    if match:
        return match.group(1).strip()
    return ""


def fetch_url(url: str) -> RawPage:
    """Fetch *url* with one GET and return a :class:`RawPage`.

    The body is streamed so that oversized pages are rejected as soon as
    they cross ``settings.max_content_bytes``.

    Raises:
        httpx.HTTPStatusError: If the server returns a 4xx/5xx status code.
        httpx.RequestError: On connection, DNS or timeout failures.
        FetchError: If the body is larger than the configured limit or blank.
    """
    headers = {"User-Agent": settings.user_agent, "Accept": _ACCEPT}

    with httpx.Client(
        headers=headers,
        timeout=settings.request_timeout,
        follow_redirects=True,
    ) as client:
        with client.stream("GET", url) as response:
            response.raise_for_status()

            declared = response.headers.get("content-length")
            if declared and declared.isdigit() and int(declared) > settings.max_content_bytes:
                raise FetchError(_too_large_message())

            buf = bytearray()
            for chunk in response.iter_bytes():
                buf.extend(chunk)
                if len(buf) > settings.max_content_bytes:
                    raise FetchError(_too_large_message())

            encoding = response.encoding or "utf-8"
            html = bytes(buf).decode(encoding, errors="replace")
            status_code = response.status_code
            content_type = response.headers.get("content-type", "")

    if not html.strip():
        raise FetchError("Fetched content is empty.")

    logger.info(
        "Fetched %s (HTTP %d, %d chars, content-type=%r)",
        url, status_code, len(html), content_type,
    )
    return RawPage(url=url, html=html, status_code=status_code, content_type=content_type)
