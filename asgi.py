"""
asgi.py -- ASGI entry point for the alert service.

Run with:  uvicorn asgi:app --reload

Run a single worker: sessions live in process memory (auth/sessions.py),
so a second worker would not recognise tokens issued by the first.
"""

from api.main import app

__all__ = ["app"]
