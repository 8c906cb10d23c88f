"""Interactive chat about a Markdown document."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mdfetch.llm.chat import ChatSession

_QUIT = {"/quit", "/exit"}


def chat_cmd(
    context: Optional[Path] = typer.Option(
        None,
        "--context",
        "-c",
        help="Markdown file the assistant should answer questions about.",
    ),
) -> None:
    """Chat with the assistant.  Type /reset to clear the transcript, /quit to leave."""
    markdown: str | None = None
    if context is not None:
        if not context.is_file():
            typer.echo(f"[chat] No such file: {context}", err=True)
            raise typer.Exit(1)
        markdown = context.read_text(encoding="utf-8")
        typer.echo(f"[chat] Loaded {context.name} ({len(markdown)} chars).")
    else:
        typer.echo("[chat] No document loaded; answering general questions.")

    session = ChatSession(markdown_content=markdown)

    while True:
        try:
            question = typer.prompt("you", prompt_suffix="> ").strip()
        except typer.Abort:
            break

        if not question:
            continue
        if question in _QUIT:
            break
        if question == "/reset":
            session.reset(markdown)
            typer.echo("[chat] Transcript cleared.")
            continue

        try:
            reply = session.ask(question)
        except Exception as exc:  # noqa: BLE001
            typer.echo(f"[chat] Error: {exc}", err=True)
            continue
        typer.echo(f"assistant> {reply}")

    typer.echo("[chat] Bye.")
