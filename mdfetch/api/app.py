"""FastAPI application factory.

Routers
-------
Endpoint groups are mounted as follows:

    /convert, /normalize  — URL → Markdown conversion and HTML normalisation
    /chat                 — Chat assistant (SSE streaming)
    /healthz              — Liveness check
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mdfetch import __version__
from mdfetch.api.routers import chat as chat_router
from mdfetch.api.routers import convert as convert_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Logging is left to the host process (``mdfetch serve`` or uvicorn).
    """
    app = FastAPI(
        title="mdfetch API",
        description=(
            "Fetches a web page, normalises its HTML according to the chosen "
            "processing mode, formats it as Markdown with an LLM, and answers "
            "questions about the result."
        ),
        version=__version__,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(convert_router.router, tags=["convert"])
    app.include_router(chat_router.router, prefix="/chat", tags=["chat"])

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    return app


# Module-level instance used by uvicorn:
#   uvicorn mdfetch.api.app:app --reload
app = create_app()
