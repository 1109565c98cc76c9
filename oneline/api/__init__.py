"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from oneline.api import app

    uvicorn oneline.api:app --reload
"""

from oneline.api.app import app

__all__ = ["app"]
