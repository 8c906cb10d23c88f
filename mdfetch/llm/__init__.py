"""LLM collaborators — Markdown formatter and chat assistant."""

from mdfetch.llm.chat import ChatSession, chat_reply, chat_stream
from mdfetch.llm.formatter import format_to_markdown, format_with_external_api
from mdfetch.llm.provider import FormatterError, get_llm

__all__ = [
    "get_llm",
    "FormatterError",
    "format_to_markdown",
    "format_with_external_api",
    "chat_reply",
    "chat_stream",
    "ChatSession",
]
