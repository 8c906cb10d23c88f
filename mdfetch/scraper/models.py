"""Data models for the fetch → normalise pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProcessingMode(str, Enum):
    """How much HTML pre-processing happens before the formatter is invoked."""

    EXTRACT_BODY_STRIP_TAGS = "extract_body_strip_tags"
    FULL_PAGE_STRIP_TAGS = "full_page_strip_tags"
    FULL_PAGE_AI_HANDLES_HTML = "full_page_ai_handles_html"
    EXTERNAL_API = "external_api"

    @property
    def is_local(self) -> bool:
        """``True`` for the modes handled by the local normaliser + formatter."""
        return self is not ProcessingMode.EXTERNAL_API

    @property
    def strips_tags(self) -> bool:
        return self in (
            ProcessingMode.EXTRACT_BODY_STRIP_TAGS,
            ProcessingMode.FULL_PAGE_STRIP_TAGS,
        )


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int
    content_type: str = ""

    @property
    def is_html(self) -> bool:
        return "text/html" in self.content_type.lower()
