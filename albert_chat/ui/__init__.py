"""NiceGUI interface - thin visualization layer for the chat client.

Responsibilities:
    - Login gate with password and third-party sign-in
    - Chat transcript display with typing placeholder
    - Star ratings, copy-to-clipboard and related-topic buttons
    - Sign-out

Contains no business logic. Renders state owned by the SessionManager and
the ChatController.
"""

from albert_chat.ui.pages import register_pages

__all__ = ["register_pages"]
