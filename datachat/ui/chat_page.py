"""NiceGUI chat interface with SSE streaming, sign-in and saved chats."""

import logging
import os
from datetime import datetime

from nicegui import app, context, run, ui

from datachat.auth.config import get_firebase_config
from datachat.auth.firebase import AuthError
from datachat.auth.popup import firebase_head_html, sign_in_with_popup, sign_out
from datachat.models.schemas import Message, UserProfile
from datachat.relay.persona import PERSONA_NAME
from datachat.store.chat_store import get_chat_store
from datachat.ui.markdown import markdown_to_html
from datachat.ui.session import ERROR_MESSAGE, ChatSession

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3001")

INPUT_PLACEHOLDER = "Chat with Data"
DISCLAIMER = "Chats are not private. Do not enter private/confidential information."

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #0b1220; min-height: 100vh; }

    .app-container {
        background: #111827;
        border-radius: 12px;
        box-shadow: 0 2px 12px rgba(0, 0, 0, 0.4);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #b8860b 0%, #d4a017 100%); }

    .user {
        background: #1e3a8a;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .model {
        background: #1f2937;
        color: #e5e7eb;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #d4a017;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .chat-item { border-radius: 8px; cursor: pointer; }
    .chat-item:hover { background: rgba(212, 160, 23, 0.15); }
    .chat-item.active { background: rgba(212, 160, 23, 0.25); }

    .model strong { font-weight: 600; }
    .model pre { margin: 0.5rem 0; }
    .model code { font-family: 'Menlo', 'Monaco', monospace; }
    .model a { color: #93c5fd; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    firebase_config = get_firebase_config()
    store = get_chat_store() if firebase_config.enabled else None
    if store is not None:
        ui.add_head_html(firebase_head_html(firebase_config))

    session = ChatSession(store=store, base_url=API_BASE_URL)
    unsubscribe = None
    rendered_version = -1

    messages_container: ui.column
    scroll_area: ui.scroll_area
    live_bubble: ui.html | None = None
    error_label: ui.label
    input_field: ui.input
    send_btn: ui.button

    # === Rendering ===

    def render_message(msg: Message) -> ui.html:
        is_user = msg.role == "user"
        align = "justify-end" if is_user else "justify-start"
        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {msg.role}"):
                    bubble = ui.html(markdown_to_html(msg.text), sanitize=False).classes(
                        "text-sm leading-relaxed"
                    )
                ui.label(datetime.fromtimestamp(msg.id / 1000).strftime("%I:%M %p")).classes(
                    f"text-[10px] text-gray-500 {'self-end' if is_user else 'self-start'}"
                )
        return bubble

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start"):
            with ui.element("div").classes("model px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")

    def refresh_messages() -> None:
        nonlocal live_bubble
        live_bubble = None
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("smart_toy").classes("text-5xl text-gray-600")
                    ui.label(f"Start a conversation with {PERSONA_NAME}").classes(
                        "text-lg text-gray-500"
                    )
            for msg in session.messages:
                bubble = render_message(msg)
                live_bubble = bubble if msg.role == "model" else None
            if session.is_streaming and session.messages[-1].role == "user":
                render_typing_indicator()
        error_label.set_text(session.error)
        error_label.set_visibility(bool(session.error))
        scroll_area.scroll_to(percent=1.0)

    def on_update() -> None:
        last = session.messages[-1]
        if live_bubble is not None and last.role == "model":
            live_bubble.set_content(markdown_to_html(last.text))
            scroll_area.scroll_to(percent=1.0)
        else:
            refresh_messages()

    @ui.refreshable
    def chat_list() -> None:
        if session.user is None:
            ui.label("Sign in to save your chats.").classes("text-sm text-gray-500 px-2")
            return
        if not session.chats:
            ui.label("No saved chats yet.").classes("text-sm text-gray-500 px-2")
            return
        for chat in session.chats:
            active = "active" if chat.id == session.chat_id else ""
            with ui.row().classes(f"chat-item {active} w-full items-center no-wrap px-2 py-1"):
                ui.label(chat.title).classes("flex-grow text-sm text-gray-200 truncate").on(
                    "click", lambda _, cid=chat.id: select_chat(cid)
                )
                ui.button(
                    icon="delete", on_click=lambda _, cid=chat.id: delete_chat(cid)
                ).props("flat round dense size=sm color=grey")

    @ui.refreshable
    def account_area() -> None:
        if store is None:
            return
        if session.user is None:
            ui.button("Sign in with Google", icon="login", on_click=handle_sign_in).props(
                "flat color=white no-caps"
            )
            return
        with ui.row().classes("items-center gap-2"):
            if session.user.photo_url:
                ui.image(session.user.photo_url).classes("w-8 h-8 rounded-full")
            ui.label(session.user.display_name or session.user.email or "").classes(
                "text-sm text-white"
            )
            ui.button(icon="logout", on_click=handle_sign_out).props("flat round color=white")

    def check_chat_list() -> None:
        nonlocal rendered_version
        if session.chats_version != rendered_version:
            rendered_version = session.chats_version
            chat_list.refresh()

    # === Actions ===

    def remember_chat_id() -> None:
        app.storage.user["chat_id"] = session.chat_id

    def start_subscription() -> None:
        nonlocal unsubscribe
        stop_subscription()
        if store is not None and session.user is not None:
            unsubscribe = store.subscribe(session.user.uid, session.set_chats)

    def stop_subscription() -> None:
        nonlocal unsubscribe
        if unsubscribe is not None:
            unsubscribe()
            unsubscribe = None

    async def restore_chat() -> None:
        chat_id = app.storage.user.get("chat_id")
        if store is None or session.user is None or not chat_id:
            return
        try:
            record = await run.io_bound(store.get_chat, session.user.uid, chat_id)
        except Exception:
            logger.exception(f"Failed to restore chat {chat_id}")
            return
        if record is not None:
            session.load(record)
            refresh_messages()
            chat_list.refresh()

    async def send_message() -> None:
        text = input_field.value or ""
        if session.is_streaming:
            return
        input_field.value = ""
        if not text.strip():
            return

        send_btn.disable()
        try:
            await session.send(text, on_update)
        finally:
            send_btn.enable()
            remember_chat_id()
            refresh_messages()
            chat_list.refresh()

    def select_chat(chat_id: str) -> None:
        if session.select_chat(chat_id):
            remember_chat_id()
            refresh_messages()
            chat_list.refresh()

    async def delete_chat(chat_id: str) -> None:
        try:
            deleted = await session.delete_chat(chat_id)
        except Exception:
            logger.exception(f"Failed to delete chat {chat_id}")
            ui.notify(ERROR_MESSAGE, type="negative")
            return
        if not deleted:
            return
        remember_chat_id()
        refresh_messages()
        chat_list.refresh()

    def new_chat() -> None:
        if session.new_chat():
            remember_chat_id()
            refresh_messages()
            chat_list.refresh()

    async def handle_sign_in() -> None:
        try:
            user = await sign_in_with_popup()
        except AuthError as e:
            logger.warning(f"Google sign-in failed: {e}")
            ui.notify("Sign-in failed.", type="negative")
            return
        session.sign_in(user)
        app.storage.user["user"] = user.model_dump()
        start_subscription()
        account_area.refresh()
        chat_list.refresh()

    async def handle_sign_out() -> None:
        stop_subscription()
        await sign_out()
        session.sign_out()
        app.storage.user.pop("user", None)
        remember_chat_id()
        account_area.refresh()
        chat_list.refresh()

    # === Restore signed-in state ===

    if store is not None and (saved_user := app.storage.user.get("user")):
        session.sign_in(UserProfile.model_validate(saved_user))
        start_subscription()
    context.client.on_disconnect(stop_subscription)

    # === UI Layout ===

    with ui.left_drawer(value=False).classes("bg-gray-900") as drawer:
        with ui.row().classes("w-full items-center justify-between px-2"):
            ui.label("My Chats").classes("text-lg font-semibold text-gray-100")
            ui.button(icon="add", on_click=new_chat).props("flat round color=white")
        chat_list()

    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.button(icon="menu", on_click=drawer.toggle).props("flat round color=white")
                ui.icon("smart_toy").classes("text-white text-3xl")
                ui.label(PERSONA_NAME).classes("text-lg font-semibold text-white")
            account_area()

        # Messages
        with ui.scroll_area().classes("flex-grow w-full") as scroll_area:
            messages_container = ui.column().classes("w-full gap-4 p-5")

        error_label = ui.label().classes("w-full px-5 text-sm text-red-400")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-center border-t border-gray-700"):
            input_field = (
                ui.input(placeholder=INPUT_PLACEHOLDER)
                .props("dark outlined dense")
                .classes("flex-grow")
                .on("keydown.enter", send_message)
            )
            send_btn = ui.button("Send", on_click=send_message).props("unelevated color=amber-8")

        ui.label(DISCLAIMER).classes("w-full px-5 pb-3 text-xs font-semibold text-gray-400")

    refresh_messages()
    ui.timer(0.5, check_chat_list)
    ui.timer(0.1, restore_chat, once=True)
