"""NiceGUI chat view for a signed-in user."""

from nicegui import ui

from albert_chat.auth import SessionManager
from albert_chat.chat import CopyIndicator, markdown_to_html, split_related_topics
from albert_chat.chat.controller import MAX_STARS, MIN_STARS
from albert_chat.models import Message
from albert_chat.services import ChatServices

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f3f4f6; min-height: 100vh; }

    .sidebar { background: white; border-right: 1px solid #e5e7eb; }

    .message-user {
        background: #dbeafe;
        border: 1px solid #bfdbfe;
        border-radius: 8px;
    }

    .message-bot {
        background: #f3f4f6;
        border: 1px solid #e5e7eb;
        border-radius: 8px;
    }

    .avatar-user { background: #3b82f6; }
    .avatar-bot { background: #6b7280; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #6b7280;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .send-btn { background: #3b82f6 !important; color: white !important; }

    /* Markdown styling */
    .message-body strong { font-weight: 600; }
    .message-body em { font-style: italic; }
    .message-body pre { margin: 0.5rem 0; }
    .message-body code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-body ul, .message-body ol { margin: 0.5rem 0; }
</style>
"""


async def render_chat(services: ChatServices, manager: SessionManager) -> None:
    """Render the chat layout and load the conversation history."""
    controller = services.chat_controller(manager)
    copy_indicator = CopyIndicator()
    user_email = manager.session.user.email if manager.session else None

    messages_container: ui.column
    scroll_area: ui.scroll_area
    input_field: ui.input

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-bot"
        icon = "person" if is_user else "smart_toy"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center shrink-0 {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_typing() -> None:
        with ui.row().classes("gap-1 py-2"):
            for _ in range(3):
                ui.element("div").classes("typing-dot")

    def render_actions(index: int, msg: Message) -> None:
        rating = controller.ratings.get(index, 0)
        with ui.row().classes("ml-12 items-center gap-0"):
            for star in range(MIN_STARS, MAX_STARS + 1):
                color = "text-yellow-400" if star <= rating else "text-gray-300"
                ui.button(
                    icon="star" if star <= rating else "star_border",
                    on_click=lambda i=index, s=star: controller.rate(i, s),
                ).props("flat round dense").classes(color)
            if copy_indicator.is_active(index):
                ui.icon("check_circle").classes("text-green-500 text-xl ml-3")
            else:
                ui.button(
                    icon="content_copy", on_click=lambda i=index: copy_message(i)
                ).props("flat round dense").classes("text-gray-500 ml-2").tooltip("Copy")

    def render_topics() -> None:
        with ui.column().classes("ml-12 w-full gap-2"):
            for topic in controller.related_topics:
                ui.button(topic, on_click=lambda t=topic: send_message(t)).props(
                    "flat no-caps align=left"
                ).classes("w-full bg-gray-200 text-gray-700 rounded-lg")

    def render_message(index: int, msg: Message) -> None:
        is_user = not msg.is_bot
        bubble = "message-user" if is_user else "message-bot"

        with ui.column().classes("w-full gap-2"):
            with ui.row().classes("w-full gap-3 items-start no-wrap"):
                render_avatar(is_user)
                with ui.element("div").classes(f"flex-1 px-4 py-3 {bubble}"):
                    if msg.is_pending:
                        render_typing()
                    else:
                        body, _ = split_related_topics(msg.text)
                        ui.html(markdown_to_html(body), sanitize=False).classes(
                            "message-body leading-relaxed"
                        )
            if msg.is_bot and not msg.is_pending:
                render_actions(index, msg)
            if controller.shows_topics(index):
                render_topics()

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not controller.transcript:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Start a conversation").classes("text-lg text-gray-400")
            else:
                for index, msg in enumerate(controller.transcript):
                    render_message(index, msg)
        scroll_area.scroll_to(percent=1.0)

    def copy_message(index: int) -> None:
        ui.clipboard.write(controller.transcript[index].text)
        copy_indicator.mark(index)

    async def send_message(text: str | None = None) -> None:
        message = input_field.value if text is None else text
        if not message or not message.strip():
            return
        if text is None:
            input_field.value = ""
        await controller.send(message)

    async def sign_out() -> None:
        await manager.sign_out()

    controller.on_change = refresh_messages
    copy_indicator.on_change = refresh_messages

    # === UI Layout ===
    with ui.row().classes("w-full h-screen gap-0 no-wrap"):
        # Sidebar
        with ui.column().classes("sidebar w-1/5 h-full gap-0"):
            with ui.row().classes("w-full p-3 border-b items-center justify-between"):
                with ui.row().classes("items-center gap-2"):
                    ui.icon("history").classes("text-2xl")
                    ui.label("Chat history").classes("text-xl font-semibold")
                ui.button(icon="logout", on_click=sign_out).props(
                    "flat round dense"
                ).classes("text-gray-500").tooltip("Sign out")
            ui.element("div").classes("flex-grow w-full")
            with ui.row().classes("w-full p-3 border-t items-center gap-2"):
                with ui.element("div").classes(
                    "w-8 h-8 rounded-full avatar-user flex items-center justify-center"
                ):
                    ui.icon("person").classes("text-white")
                ui.label(user_email or "").classes("text-sm font-medium")

        # Main chat area
        with ui.column().classes("flex-1 h-full gap-0 px-[10%]"):
            with ui.row().classes("w-full p-3 border-b bg-white items-center gap-3"):
                render_avatar(False)
                ui.label("AI Assistant").classes("text-2xl font-semibold")
                ui.label(controller.chat_id[-9:].upper()).classes(
                    "ml-auto text-xs text-gray-400 font-mono"
                )

            with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
                messages_container = ui.column().classes("w-full py-4 gap-6")

            with ui.row().classes("w-full p-4 gap-3 items-center bg-white border-t no-wrap"):
                input_field = (
                    ui.input(placeholder="Type your message...")
                    .props("outlined dense")
                    .classes("flex-grow text-lg")
                    .on("keydown.enter", lambda: send_message())
                )
                send_button = ui.button(icon="send", on_click=lambda: send_message()).props(
                    "round unelevated"
                ).classes("send-btn")

    # Input opens once the stored history is on screen
    input_field.disable()
    send_button.disable()
    refresh_messages()
    controller.show_history(
        await services.history.load(controller.chat_id, manager.get_access_token)
    )
    input_field.enable()
    send_button.enable()
