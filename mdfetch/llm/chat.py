"""Chat assistant that answers questions about a fetched Markdown document.

``chat_stream`` is an async generator of SSE-formatted strings that the API
router forwards directly to the browser; ``chat_reply`` is the blocking
variant used by the CLI through :class:`ChatSession`.

SSE event shapes
----------------
Every yielded string is a self-contained SSE frame::

    data: {"event": "token", "text": " ..."}\\n\\n
    data: {"event": "done"}\\n\\n
    data: {"event": "error", "detail": "..."}\\n\\n
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

from mdfetch.config import settings
from mdfetch.llm.provider import get_llm, message_text

_ASSISTANT_ROLES = {"assistant", "model", "ai"}


def _sse(payload: dict) -> str:
    """Encode *payload* as a single SSE frame (``data: ...\\n\\n``)."""
    return f"data: {json.dumps(payload)}\n\n"


def _turn_text(turn: dict[str, Any]) -> str:
    """Return the text of a history turn.

    Accepts ``{"content": "..."}`` as well as the ``{"parts": [{"text": "..."}]}``
    shape sent by browser clients.
    """
    content = turn.get("content")
    if content is not None:
        return str(content)
    parts = turn.get("parts") or []
    return "".join(
        str(part.get("text", "")) for part in parts if isinstance(part, dict)
    )


def build_system_prompt(markdown_content: str | None) -> str:
    """Return the system prompt, grounded in *markdown_content* when given."""
    base = (
        "You are an AI assistant. You MUST respond in the same language as "
        "the user's query."
    )
    if markdown_content:
        return (
            f"{base}\n\n"
            "The user is viewing the following Markdown content:\n"
            "<markdown_content>\n"
            f"{markdown_content}\n"
            "</markdown_content>\n\n"
            "If the user's question is related to this content, your answer "
            "MUST be based SOLELY on it. Do not use external knowledge for "
            "questions about this content. If the question is clearly "
            "unrelated, or the content does not answer a related question, "
            "say that the content does not cover the topic. You may then use "
            "general knowledge, but state clearly that the information is not "
            "from the provided Markdown."
        )
    return (
        f"{base}\n\n"
        "No Markdown content has been provided. Answer the user's questions "
        "generally. If they ask about specific content, tell them that no "
        "content has been fetched yet."
    )


def build_messages(
    question: str,
    history: list[dict[str, Any]],
    markdown_content: str | None = None,
) -> list[Any]:
    """Build the LangChain message list for one chat turn."""
    from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

    lc_messages: list[Any] = [SystemMessage(content=build_system_prompt(markdown_content))]

    # Keep the last N user/assistant exchanges
    max_turns = settings.chat_max_history_turns
    trimmed = history[-(max_turns * 2):] if max_turns > 0 else []
    for turn in trimmed:
        role = str(turn.get("role", "user")).lower()
        content = _turn_text(turn)
        if role in _ASSISTANT_ROLES:
            lc_messages.append(AIMessage(content=content))
        else:
            lc_messages.append(HumanMessage(content=content))

    lc_messages.append(HumanMessage(content=question))
    return lc_messages


def chat_reply(
    question: str,
    history: list[dict[str, Any]],
    markdown_content: str | None = None,
) -> str:
    """Return the assistant's full reply to *question*."""
    llm = get_llm()
    response = llm.invoke(build_messages(question, history, markdown_content))
    return message_text(response).strip()


async def chat_stream(
    question: str,
    history: list[dict[str, Any]],
    markdown_content: str | None = None,
) -> AsyncIterator[str]:
    """Yield SSE-formatted strings for a single chat turn.

    Args:
        question: The user's latest message.
        history: Prior ``{"role": "user"|"assistant", "content": "..."}``
            turns used as conversation context. Turns may carry
            ``"parts": [{"text": ...}]`` instead of ``content``.
        markdown_content: The document the user is looking at, if any.

    Yields:
        SSE-formatted strings (see module docstring for shapes).
    """
    try:
        lc_messages = build_messages(question, history, markdown_content)
        llm = get_llm(streaming=True)
        async for chunk in llm.astream(lc_messages):
            text = message_text(chunk)
            if text:
                yield _sse({"event": "token", "text": text})

        yield _sse({"event": "done"})

    except Exception as exc:  # noqa: BLE001
        yield _sse({"event": "error", "detail": str(exc)})


@dataclass
class ChatSession:
    """Caller-owned chat state: the context document and the transcript."""

    markdown_content: str | None = None
    history: list[dict[str, Any]] = field(default_factory=list)

    def ask(self, question: str) -> str:
        """Send *question*, record both turns, and return the reply."""
        reply = chat_reply(question, list(self.history), self.markdown_content)
        self.history.append({"role": "user", "content": question})
        self.history.append({"role": "assistant", "content": reply})
        return reply

    def reset(self, markdown_content: str | None = None) -> None:
        """Clear the transcript and swap the context document."""
        self.history.clear()
        self.markdown_content = markdown_content
