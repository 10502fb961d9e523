"""FastAPI application hosting the chat UI.

Endpoints:
    - GET /health: Service health status
    - GET /: Slogan generator page (NiceGUI, mounted at startup)
"""

from sloganchat.api.app import app, create_app

__all__ = ["app", "create_app"]
