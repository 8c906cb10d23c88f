"""Centralised settings for mdfetch.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Chat / formatting model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "ollama")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    max_content_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTENT_BYTES", str(5 * 1024 * 1024)))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("FETCH_USER_AGENT", "MarkdownFetcher/1.0")
    )

    # ------------------------------------------------------------------
    # External formatting API (``external_api`` processing mode)
    # ------------------------------------------------------------------
    external_api_url: str = field(
        default_factory=lambda: os.environ.get("EXTERNAL_API_URL", "")
    )
    external_api_timeout: float = field(
        default_factory=lambda: float(os.environ.get("EXTERNAL_API_TIMEOUT", "60.0"))
    )

    # ------------------------------------------------------------------
    # Chat assistant
    # ------------------------------------------------------------------
    chat_max_history_turns: int = field(
        default_factory=lambda: int(os.environ.get("CHAT_MAX_HISTORY_TURNS", "10"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton — import this everywhere:
#   from mdfetch.config import settings
settings = Settings()
