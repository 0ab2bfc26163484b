"""Remote assistant integration.

Responsibilities:
    - One GET request per user message to the assistant webhook
    - Plain-text replies returned verbatim
    - Fixed fallback reply on transport failure
"""

from albert_chat.assistant.webhook_client import FALLBACK_REPLY, MessageExchanger

__all__ = ["FALLBACK_REPLY", "MessageExchanger"]
