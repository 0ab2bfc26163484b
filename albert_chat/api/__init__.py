"""FastAPI host for the chat client.

Endpoints:
    - GET /health: Service health status and persistence failure count

NiceGUI pages are mounted onto the same application by ``albert_chat.main``.
"""

from albert_chat.api.app import create_app

__all__ = ["create_app"]
