"""Login view shown while nobody is signed in."""

import logging

from nicegui import ui

from albert_chat.auth import AuthError, SessionManager

logger = logging.getLogger(__name__)

PROVIDER_LABELS = {
    "google": "Continue with Google",
    "facebook": "Continue with Facebook",
    "github": "Continue with GitHub",
    "azure": "Continue with Microsoft",
}


def render_login(manager: SessionManager, providers: list[str]) -> None:
    """Render the sign-in card: e-mail/password form plus OAuth buttons."""

    async def sign_in() -> None:
        if not email.value or not password.value:
            ui.notify("Enter your e-mail and password", type="warning")
            return
        try:
            await manager.sign_in_with_password(email.value, password.value)
        except AuthError as e:
            logger.info(f"Password sign-in failed: {e}")
            ui.notify(str(e), type="negative")

    async def sign_up() -> None:
        if not email.value or not password.value:
            ui.notify("Enter your e-mail and password", type="warning")
            return
        try:
            session = await manager.sign_up(email.value, password.value)
        except AuthError as e:
            ui.notify(str(e), type="negative")
            return
        if session is None:
            ui.notify("Check your e-mail to confirm your account", type="info")

    def start_oauth(provider: str) -> None:
        ui.navigate.to(manager.oauth_url(provider))

    with (
        ui.element("div").classes("w-full min-h-screen flex items-center justify-center"),
        ui.card().classes("w-full max-w-md p-8 gap-4"),
    ):
        ui.label("Sign in to chat").classes("text-2xl font-bold w-full text-center")

        email = ui.input("E-mail").props("type=email outlined").classes("w-full")
        password = (
            ui.input("Password", password=True, password_toggle_button=True)
            .props("outlined")
            .classes("w-full")
            .on("keydown.enter", sign_in)
        )

        ui.button("Sign in", on_click=sign_in).props("unelevated").classes("w-full send-btn")
        ui.button("Create account", on_click=sign_up).props("flat").classes("w-full")

        if providers:
            with ui.row().classes("w-full items-center gap-2"):
                ui.separator().classes("flex-1")
                ui.label("or").classes("text-sm text-gray-400")
                ui.separator().classes("flex-1")
            for provider in providers:
                label = PROVIDER_LABELS.get(provider, f"Continue with {provider.title()}")
                ui.button(label, on_click=lambda p=provider: start_oauth(p)).props(
                    "outline"
                ).classes("w-full")
