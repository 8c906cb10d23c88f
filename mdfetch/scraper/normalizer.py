"""HTML → plain-text normalisation that feeds the Markdown formatter.

The normaliser is deliberately pattern-based: tags are matched by name with
regular expressions rather than parsed into a DOM, so malformed or
overlapping markup still loses its tags (at worst producing extra blank
lines).  Structure inference is left to the downstream LLM prompt.

Pipeline for the stripping modes::

    extract_body_content  (extract_body_strip_tags only)
    → strip_html_tags
        1. drop <script>/<style> elements
        2. newline around block-level tags
        3. <br> → newline, <hr> → Markdown thematic break
        4. drop every remaining tag
        5. decode a fixed entity table
        6. normalize_whitespace
"""

from __future__ import annotations

import logging
import re

from mdfetch.scraper.models import ProcessingMode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_BODY_RE = re.compile(r"<body[^>]*>([\s\S]*?)</body>", re.IGNORECASE)

_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[^>]*>[\s\S]*?</style>", re.IGNORECASE)

BLOCK_TAGS: tuple[str, ...] = (
    "p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote",
    "td", "th", "tr", "caption", "section", "article", "aside", "nav",
    "header", "footer", "address", "dd", "dt", "dl", "figure", "figcaption",
)
_BLOCK_NAMES = "|".join(BLOCK_TAGS)
_BLOCK_OPEN_RE = re.compile(rf"<(?:{_BLOCK_NAMES})(?:\s[^>]*)?>", re.IGNORECASE)
_BLOCK_CLOSE_RE = re.compile(rf"</(?:{_BLOCK_NAMES})>", re.IGNORECASE)

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_HR_RE = re.compile(r"<hr\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")

# Order matters: &amp; is decoded after &lt;/&gt; so "&amp;lt;" yields "&lt;".
ENTITIES: tuple[tuple[str, str], ...] = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&copy;", "©"),
    ("&reg;", "®"),
)

_SPACES_RE = re.compile(r" +")
_BLANK_LINES_RE = re.compile(r"\n\s*\n")

THEMATIC_BREAK = "\n\n---\n\n"


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------

def extract_body_content(html: str) -> str:
    """Return the trimmed content of the first ``<body>`` element of *html*.

    Falls back to *html* unchanged when there is no ``<body>`` tag or its
    content is blank, so extraction never empties a document on its own.
    """
    match = _BODY_RE.search(html)
    if match:
        body = match.group(1).strip()
        if body:
            logger.debug("Extracted content from <body> tag (%d chars).", len(body))
            return body
    logger.warning(
        "Could not find <body> tag or it was empty; using the full HTML content."
    )
    return html


def decode_entities(text: str) -> str:
    """Decode the fixed entity table; anything else is left as-is."""
    for entity, char in ENTITIES:
        text = text.replace(entity, char)
    return text


def normalize_whitespace(text: str) -> str:
    """Collapse space runs, squeeze blank lines to one, and trim.

    Idempotent: normalising already-normalised text returns it unchanged.
    """
    text = _SPACES_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def strip_html_tags(html: str) -> str:
    """Turn an HTML fragment into plain text with inferred line breaks.

    Never raises.  Anything of the form ``<...>`` is treated as a tag, so a
    stray ``<`` followed later by ``>`` in ordinary text is removed along
    with what lies between them; a lone ``<`` or ``>`` survives.
    """
    if not html:
        return ""

    text = _SCRIPT_RE.sub("", html)
    text = _STYLE_RE.sub("", text)

    text = _BLOCK_OPEN_RE.sub(lambda m: "\n" + m.group(0), text)
    text = _BLOCK_CLOSE_RE.sub(lambda m: m.group(0) + "\n", text)

    text = _BR_RE.sub("\n", text)
    text = _HR_RE.sub(THEMATIC_BREAK, text)

    text = _TAG_RE.sub("", text)
    text = decode_entities(text)
    return normalize_whitespace(text)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize(html: str, mode: ProcessingMode | str) -> str:
    """Produce the text handed to the Markdown formatter for *mode*.

    Args:
        html: The raw fetched document.
        mode: A :class:`ProcessingMode` or its string value.

    Returns:
        The normalised text, or *html* unchanged for
        ``full_page_ai_handles_html``.  An empty result is logged as a
        warning and still returned.

    Raises:
        ValueError: For ``external_api`` (which never reaches the normaliser)
            or an unknown mode string.
    """
    mode = ProcessingMode(mode)

    if mode is ProcessingMode.FULL_PAGE_AI_HANDLES_HTML:
        return html
    if mode is ProcessingMode.EXTRACT_BODY_STRIP_TAGS:
        text = strip_html_tags(extract_body_content(html))
    elif mode is ProcessingMode.FULL_PAGE_STRIP_TAGS:
        text = strip_html_tags(html)
    else:
        raise ValueError(
            f"Processing mode {mode.value!r} bypasses the normaliser; "
            "send the URL to the external formatter instead."
        )

    if not text:
        logger.warning(
            "Content became empty after stripping HTML tags (mode=%s); "
            "the page may contain markup only.",
            mode.value,
        )
    return text
