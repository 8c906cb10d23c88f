"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from mdfetch.api import app

    uvicorn mdfetch.api:app --reload
"""

from mdfetch.api.app import app

__all__ = ["app"]
