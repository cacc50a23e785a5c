"""FastAPI listing store API serving paged listing queries."""

from estatesearch.api.app import create_app

__all__ = [
    "create_app",
]
