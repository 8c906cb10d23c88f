"""Conversion endpoints — URL → Markdown, and raw HTML normalisation.

Routes
------
POST /convert      Body: {"url": "https://...", "mode": "..."}   → fetch_and_format
POST /normalize    Body: {"html": "<html>...", "mode": "..."}    → normalize
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from mdfetch.pipeline import fetch_and_format
from mdfetch.scraper.models import ProcessingMode
from mdfetch.scraper.normalizer import normalize

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ConvertRequest(BaseModel):
    url: str
    mode: ProcessingMode = ProcessingMode.EXTRACT_BODY_STRIP_TAGS


class ConversionOut(BaseModel):
    markdown: str
    submitted_url: str
    mode: ProcessingMode
    title: str


class NormalizeRequest(BaseModel):
    html: str
    mode: ProcessingMode = ProcessingMode.EXTRACT_BODY_STRIP_TAGS


class NormalizeOut(BaseModel):
    text: str
    mode: ProcessingMode
    empty: bool


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/convert", response_model=ConversionOut)
def convert_endpoint(body: ConvertRequest) -> dict[str, Any]:
    """Fetch a URL and return its Markdown rendition.

    An invalid URL answers 422; fetch or formatting failures answer 502 with
    the user-facing error message as ``detail``.
    """
    result = fetch_and_format(body.url, body.mode)
    if not result.success:
        status = 422 if result.failed_stage == "validation" else 502
        raise HTTPException(status_code=status, detail=result.error)
    return {
        "markdown": result.markdown or "",
        "submitted_url": result.submitted_url,
        "mode": result.mode,
        "title": result.title,
    }


@router.post("/normalize", response_model=NormalizeOut)
def normalize_endpoint(body: NormalizeRequest) -> dict[str, Any]:
    """Run the HTML normaliser on a document supplied by the caller."""
    if not body.mode.is_local:
        raise HTTPException(
            status_code=422,
            detail=f"Mode {body.mode.value!r} does not use the normaliser.",
        )
    text = normalize(body.html, body.mode)
    return {"text": text, "mode": body.mode, "empty": not text}
