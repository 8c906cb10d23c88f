"""Scraper package — web fetch & HTML normalisation."""

from mdfetch.scraper.fetcher import FetchError, extract_title, fetch_url
from mdfetch.scraper.models import ProcessingMode, RawPage
from mdfetch.scraper.normalizer import (
    extract_body_content,
    normalize,
    normalize_whitespace,
    strip_html_tags,
)

__all__ = [
    "fetch_url",
    "extract_title",
    "FetchError",
    "RawPage",
    "ProcessingMode",
    "extract_body_content",
    "strip_html_tags",
    "normalize_whitespace",
    "normalize",
]
