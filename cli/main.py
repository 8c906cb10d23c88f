"""mdfetch CLI — entry-point for all operations.

Usage:
    python cli/main.py --help

Commands:
    convert    → fetch a URL and print it as Markdown
    normalize  → run the HTML normaliser on a local file
    chat       → chat about a Markdown document
    serve      → run the HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from mdfetch.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import Optional

import typer

from mdfetch.config import settings
from mdfetch.scraper.models import ProcessingMode

from cli.commands.chat import chat_cmd

app = typer.Typer(
    name="mdfetch",
    help="Fetch web pages and convert them to Markdown.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level)


app.command("chat")(chat_cmd)


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------
@app.command("convert")
def convert(
    url: str = typer.Argument(..., help="URL to convert."),
    mode: ProcessingMode = typer.Option(
        ProcessingMode.EXTRACT_BODY_STRIP_TAGS, "--mode", "-m", help="Processing mode."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the Markdown to this file instead of stdout."
    ),
) -> None:
    """Fetch a URL and convert it to Markdown."""
    from mdfetch.pipeline import fetch_and_format

    typer.echo(f"[convert] Fetching {url!r}  (mode={mode.value}) …", err=True)
    result = fetch_and_format(url, mode)
    if not result.success:
        typer.echo(f"[convert] Error: {result.error}", err=True)
        raise typer.Exit(1)

    if result.title:
        typer.echo(f"[convert] Title  : {result.title}", err=True)

    markdown = result.markdown or ""
    if output is not None:
        output.write_text(markdown, encoding="utf-8")
        typer.echo(f"[convert] Markdown written to {output}", err=True)
    else:
        typer.echo(markdown)


@app.command("normalize")
def normalize_cmd(
    path: str = typer.Argument(..., help="HTML file to normalise ('-' reads stdin)."),
    mode: ProcessingMode = typer.Option(
        ProcessingMode.EXTRACT_BODY_STRIP_TAGS, "--mode", "-m", help="Processing mode."
    ),
) -> None:
    """Print the text the formatter would receive for a local HTML document."""
    from mdfetch.scraper.normalizer import normalize

    if not mode.is_local:
        typer.echo(f"[normalize] Mode {mode.value!r} does not use the normaliser.", err=True)
        raise typer.Exit(1)

    if path == "-":
        html = sys.stdin.read()
    else:
        source = Path(path)
        if not source.is_file():
            typer.echo(f"[normalize] No such file: {path}", err=True)
            raise typer.Exit(1)
        html = source.read_text(encoding="utf-8", errors="replace")

    typer.echo(normalize(html, mode))


# ---------------------------------------------------------------------------
# HTTP API
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "mdfetch.api.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
