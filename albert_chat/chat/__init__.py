"""Chat interaction logic, independent of the UI toolkit.

Responsibilities:
    - Transcript state machine with pending placeholders
    - Optimistic star ratings
    - Copy feedback timing
    - Related-topic split and markdown rendering of replies
"""

from albert_chat.chat.controller import ChatController, CopyIndicator
from albert_chat.chat.markdown import markdown_to_html, split_related_topics

__all__ = ["ChatController", "CopyIndicator", "markdown_to_html", "split_related_topics"]
