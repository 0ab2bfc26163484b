"""Assistant webhook client.

Sends one user message per request to the assistant webhook and returns
its plain-text reply. Transport failures become a fixed apology string so
the chat view can show them like any other reply.
"""

import logging

import httpx

from albert_chat.observability import timed

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "There was an error fetching the bot's response."


class MessageExchanger:
    """Client for the assistant webhook."""

    def __init__(self, webhook_url: str, http: httpx.AsyncClient) -> None:
        """Initialize the exchanger.

        Args:
            webhook_url: Assistant endpoint.
            http: Shared HTTP client; its timeout applies to every call.
        """
        self._webhook_url = webhook_url
        self._http = http

    async def send(self, text: str, chat_id: str, user_id: str) -> str:
        """Send a message and wait for the assistant's reply.

        Args:
            text: The user's raw message.
            chat_id: Conversation identifier.
            user_id: Signed-in user.

        Returns:
            The response body verbatim, or FALLBACK_REPLY on transport failure.
        """
        params = {"chatId": chat_id, "userId": user_id, "chatInput": text}
        try:
            with timed("webhook.send"):
                response = await self._http.get(self._webhook_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Error sending message to assistant webhook: {e}")
            return FALLBACK_REPLY

        if response.is_error:
            logger.warning(
                f"Assistant webhook answered HTTP {response.status_code} for {chat_id}"
            )
        return response.text
