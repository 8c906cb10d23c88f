"""Chat endpoint with SSE streaming.

Routes
------
POST /chat    Send a message about a Markdown document (SSE token stream)

The server keeps no conversation state: the client sends the transcript and
the document it is viewing with every message.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from mdfetch.llm.chat import chat_stream

router = APIRouter()


class ChatMessageRequest(BaseModel):
    message: str = Field(..., min_length=1)
    history: list[dict[str, Any]] = []
    markdown: str | None = None


@router.post("")
async def send_message_endpoint(body: ChatMessageRequest) -> StreamingResponse:
    """Stream the assistant reply to *message* as SSE.

    SSE event shapes::

        data: {"event": "token", "text": " ..."}
        data: {"event": "done"}
        data: {"event": "error", "detail": "..."}
    """
    return StreamingResponse(
        chat_stream(body.message, body.history, body.markdown),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
