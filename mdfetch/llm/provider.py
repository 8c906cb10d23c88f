"""LangChain chat-model factory shared by the formatter and the chat agent."""

from __future__ import annotations

from typing import Any

from mdfetch.config import settings


class FormatterError(RuntimeError):
    """A formatting collaborator (local LLM or external API) failed."""


def get_llm(streaming: bool = False) -> Any:
    """Return a configured LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(
            model=settings.openai_chat_model, temperature=0, streaming=streaming
        )

    from langchain_ollama import ChatOllama

    return ChatOllama(
        model=settings.ollama_chat_model,
        base_url=settings.ollama_base_url,
        temperature=0,
    )


def message_text(message: Any) -> str:
    """Return the text of a LangChain message (or anything printable)."""
    content = message.content if hasattr(message, "content") else message
    if isinstance(content, list):
        # Some providers return content blocks instead of a plain string.
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return str(content)
