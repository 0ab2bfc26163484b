"""NiceGUI page registration.

``/`` shows the login view or the chat, depending on the stored session.
``/auth/callback`` completes third-party sign-in and returns to ``/``.
"""

import logging

from fastapi.responses import RedirectResponse
from nicegui import app, ui

from albert_chat.auth import AuthError, AuthEvent
from albert_chat.models import AuthSession
from albert_chat.services import OAUTH_CALLBACK_PATH, ChatServices
from albert_chat.ui.chat_page import CUSTOM_CSS, render_chat
from albert_chat.ui.login_page import render_login

logger = logging.getLogger(__name__)


def _reload_on_sign_in_or_out(event: AuthEvent, session: AuthSession | None) -> None:
    if event in (AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT):
        ui.navigate.to("/")


def register_pages(services: ChatServices) -> None:
    """Register the login/chat page and the OAuth callback."""

    @ui.page("/")
    async def index_page() -> None:
        """Main page: login gate in front of the chat."""
        ui.add_head_html(CUSTOM_CSS)
        manager = services.session_manager(app.storage.user)
        manager.subscribe(_reload_on_sign_in_or_out)

        await manager.restore()
        if manager.is_authenticated:
            await render_chat(services, manager)
        else:
            render_login(manager, services.config.oauth_providers)

    @ui.page(OAUTH_CALLBACK_PATH)
    async def oauth_callback(
        code: str | None = None, error_description: str | None = None
    ) -> RedirectResponse | None:
        """Exchange the provider's code for a session."""
        manager = services.session_manager(app.storage.user)
        if code and not error_description:
            try:
                await manager.complete_oauth(code)
                return RedirectResponse("/")
            except AuthError as e:
                logger.warning(f"OAuth sign-in failed: {e}")
                error_description = str(e)

        ui.add_head_html(CUSTOM_CSS)
        with ui.column().classes("w-full min-h-screen items-center justify-center gap-4"):
            ui.icon("error_outline").classes("text-5xl text-red-400")
            ui.label(error_description or "Sign-in was cancelled").classes("text-lg")
            ui.link("Back to sign in", "/")
        return None
