"""NiceGUI chat interface with streaming replies and multiple sessions."""

import html
from datetime import datetime

from nicegui import ui

from gemini_chat.chat.controller import (
    ChatController,
    Generation,
    MessageRejectedError,
    RejectionReason,
    SendOutcome,
)
from gemini_chat.chat.store import SessionStore
from gemini_chat.constants import (
    EXAMPLE_PROMPTS,
    MAX_MESSAGE_LENGTH,
    MODEL_OPTIONS,
    SIDEBAR_LABEL_LENGTH,
    WELCOME_TEXT,
)
from gemini_chat.models.chat import ChatSession, GeminiModel, Message, Role
from gemini_chat.parsing.content_formatter import BlockType, format_content

_BLOCK_TEMPLATES = {
    BlockType.CODE: (
        '<pre class="bg-gray-800 text-gray-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
        "<code>{}</code></pre>"
    ),
    BlockType.HEADING: '<strong class="font-semibold block my-1">{}</strong>',
    BlockType.UNORDERED_ITEM: '<li class="ml-4 my-0.5">{}</li>',
    BlockType.ORDERED_ITEM: '<li class="ml-4 my-0.5 list-decimal">{}</li>',
    BlockType.BREAK: "<br>",
    BlockType.PARAGRAPH: '<p class="my-1">{}</p>',
}


def content_to_html(content: str) -> str:
    """Render message text to HTML via the line formatter.

    All text is escaped; only the block wrappers are markup.
    """
    return "".join(
        _BLOCK_TEMPLATES[block.type].format(html.escape(block.text))
        for block in format_content(content)
    )


def format_time(timestamp: datetime) -> str:
    return timestamp.astimezone().strftime("%I:%M %p")


def counter_text(draft: str) -> str:
    return f"{len(draft)}/{MAX_MESSAGE_LENGTH}"


def format_date(timestamp: datetime) -> str:
    local = timestamp.astimezone()
    return f"{local:%b} {local.day}"


def session_label(session: ChatSession) -> str:
    """Sidebar label: the title, else the start of the first user message."""
    if session.title:
        return session.title
    first = next((m for m in session.messages if m.role == Role.USER), None)
    if first is None:
        return "New chat"
    if len(first.content) > SIDEBAR_LABEL_LENGTH:
        return first.content[:SIDEBAR_LABEL_LENGTH] + "..."
    return first.content


def is_untouched(session: ChatSession | None) -> bool:
    """True when a session holds nothing but its welcome message."""
    return session is None or len(session.messages) == 1


CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #4285f4 0%, #9b72cb 60%, #d96570 100%); }

    .sidebar { background: #f9fafb; border-right: 1px solid #e5e7eb; }
    .session-item { border-radius: 8px; cursor: pointer; }
    .session-item:hover { background: #eef2ff; }
    .session-active { background: #e0e7ff; }

    .message-user {
        background: #4285f4;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .avatar-user { background: #4285f4; }
    .avatar-assistant { background: linear-gradient(135deg, #4285f4 0%, #9b72cb 60%, #d96570 100%); }

    .typing-dot {
        width: 8px; height: 8px;
        background: #4285f4;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #f9fafb;
        border: 1px solid #e5e7eb;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #4285f4; }

    .send-btn { background: #4285f4 !important; }

    .message-assistant pre { margin: 0.5rem 0; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page. Each browser tab gets its own in-memory store."""
    ui.add_head_html(CUSTOM_CSS)
    controller = ChatController()
    store = controller.store

    # Streaming reply widgets keyed by message id: (html body, typing indicator)
    reply_widgets: dict[str, tuple[ui.html, ui.row]] = {}
    sidebar_key: tuple | None = None

    input_field: ui.textarea
    counter_label: ui.label
    send_btn: ui.button
    stop_btn: ui.button

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "auto_awesome"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_typing_dots() -> ui.row:
        with ui.row().classes("gap-1 items-center h-6") as dots:
            for _ in range(3):
                ui.element("div").classes("typing-dot")
        return dots

    def render_message(msg: Message) -> None:
        is_user = msg.role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        content = html.escape(msg.content).replace("\n", "<br>")
                    else:
                        content = content_to_html(msg.content)
                    body = ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                    if msg.is_streaming:
                        dots = render_typing_dots()
                        body.set_visibility(bool(msg.content))
                        dots.set_visibility(not msg.content)
                        reply_widgets[msg.id] = (body, dots)
                ui.label(format_time(msg.timestamp)).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(True)

    def use_example(prompt: str) -> None:
        controller.draft = prompt
        input_field.run_method("focus")

    def render_welcome() -> None:
        with ui.column().classes("w-full items-center gap-3 py-10"):
            ui.icon("auto_awesome").classes("text-5xl text-indigo-400")
            ui.label("Welcome to Gemini Chat").classes("text-2xl font-bold text-gray-800")
            ui.label(WELCOME_TEXT).classes("text-gray-500 text-center")
            with ui.grid(columns=2).classes("gap-3 max-w-lg mt-4"):
                for prompt in EXAMPLE_PROMPTS:
                    ui.button(prompt, on_click=lambda p=prompt: use_example(p)).props(
                        "flat no-caps align=left"
                    ).classes("bg-white border rounded-xl text-sm text-gray-700 p-3")

    @ui.refreshable
    def message_thread() -> None:
        reply_widgets.clear()
        session = store.active_session
        if is_untouched(session):
            render_welcome()
            return
        for msg in session.messages:
            render_message(msg)

    @ui.refreshable
    def session_list() -> None:
        if not len(store):
            ui.label("No chats yet").classes("text-sm text-gray-400 px-3")
        for session in store.sessions:
            active = "session-active" if session.id == store.active_session_id else ""
            with ui.row().classes(
                f"w-full items-center justify-between px-3 py-2 session-item {active}"
            ).on("click", lambda s=session: select_chat(s.id)):
                with ui.column().classes("gap-0 flex-1 min-w-0"):
                    ui.label(session_label(session)).classes("text-sm text-gray-700 truncate")
                    ui.label(format_date(session.updated_at)).classes("text-xs text-gray-400")
                ui.button(icon="delete", on_click=lambda s=session: delete_chat(s.id)).props(
                    "flat round dense size=sm color=grey"
                )

    def on_store_change(changed: SessionStore) -> None:
        nonlocal sidebar_key
        key = (
            tuple((s.id, session_label(s), format_date(s.updated_at)) for s in changed.sessions),
            changed.active_session_id,
        )
        if key != sidebar_key:
            sidebar_key = key
            session_list.refresh()

    store.add_listener(on_store_change)

    def update_controls() -> None:
        draft = controller.draft or ""
        busy = controller.is_busy()
        counter_label.set_text(counter_text(draft))
        over_limit = len(draft) > MAX_MESSAGE_LENGTH * 0.9
        counter_label.classes(
            add="text-red-500" if over_limit else "text-gray-400",
            remove="text-gray-400" if over_limit else "text-red-500",
        )
        send_btn.set_enabled(
            bool(draft.strip()) and not busy and len(draft) <= MAX_MESSAGE_LENGTH
        )
        input_field.set_enabled(not busy)
        stop_btn.set_visibility(busy)
        clear_btn.set_visibility(len(store) > 0)

    def refresh_view() -> None:
        message_thread.refresh()
        update_controls()

    def update_streaming_reply(generation: Generation) -> None:
        widgets = reply_widgets.get(generation.reply.id)
        if widgets is None:
            return
        body, dots = widgets
        body.set_content(content_to_html(generation.text))
        body.set_visibility(True)
        dots.set_visibility(False)

    async def send_message() -> None:
        try:
            generation = controller.start()
        except MessageRejectedError as e:
            if e.reason is not RejectionReason.EMPTY:
                ui.notify(str(e), type="warning")
            return

        refresh_view()
        async for _ in controller.stream(generation):
            if generation.session_id == store.active_session_id:
                update_streaming_reply(generation)

        if generation.session_id == store.active_session_id:
            message_thread.refresh()
        update_controls()
        if generation.outcome is SendOutcome.ERROR:
            ui.notify("Failed to generate a response", type="negative")

    def stop_generation() -> None:
        controller.cancel()

    def new_chat() -> None:
        controller.new_session()
        controller.draft = ""
        refresh_view()

    def select_chat(session_id: str) -> None:
        # the row click also fires after its delete button removed the session
        if session_id not in store:
            return
        controller.select_session(session_id)
        refresh_view()

    def delete_chat(session_id: str) -> None:
        controller.delete_session(session_id)
        refresh_view()

    def change_model(model: GeminiModel) -> None:
        controller.select_model(model)
        model_hint.set_text(MODEL_OPTIONS[controller.model][1])
        model_badge.set_text(MODEL_OPTIONS[controller.model][0])

    with ui.dialog() as confirm_dialog, ui.card():
        ui.label("Are you sure you want to clear all chats? This cannot be undone.")
        with ui.row().classes("w-full justify-end"):
            ui.button("Cancel", on_click=confirm_dialog.close).props("flat")
            ui.button("Clear all", on_click=lambda: clear_all(True)).props("color=negative")

    def clear_all(confirmed: bool) -> None:
        confirm_dialog.close()
        if controller.clear_all(confirm=confirmed):
            refresh_view()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.row().classes("w-full max-w-5xl mx-auto app-container no-wrap gap-0").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Sidebar
        with ui.column().classes("w-64 h-full sidebar p-3 gap-3"):
            ui.button("New chat", icon="add", on_click=new_chat).props("unelevated no-caps").classes(
                "w-full send-btn text-white"
            )
            ui.select(
                {model: label for model, (label, _) in MODEL_OPTIONS.items()},
                value=controller.model,
                on_change=lambda e: change_model(e.value),
            ).props("dense outlined").classes("w-full")
            model_hint = ui.label(MODEL_OPTIONS[controller.model][1]).classes(
                "text-xs text-gray-500 px-1"
            )
            ui.separator()
            with ui.scroll_area().classes("flex-grow w-full"):
                session_list()

        # Chat column
        with ui.column().classes("flex-1 h-full gap-0 min-w-0"):
            # Header
            with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
                with ui.row().classes("items-center gap-3"):
                    ui.icon("auto_awesome").classes("text-white text-3xl")
                    ui.label("Gemini Chat").classes("text-lg font-semibold text-white")
                with ui.row().classes("items-center gap-3"):
                    model_badge = ui.label(MODEL_OPTIONS[controller.model][0]).classes(
                        "text-xs text-white/80"
                    )
                    clear_btn = (
                        ui.button(icon="delete_sweep", on_click=confirm_dialog.open)
                        .props("flat round color=white")
                        .tooltip("Clear all chats")
                    )

            # Messages
            with (
                ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                ui.column().classes("w-full p-5 gap-4"),
            ):
                message_thread()

            # Input
            with ui.column().classes("w-full p-4 gap-1 bg-white border-t"):
                with ui.row().classes("w-full gap-3 items-end no-wrap"):
                    with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                        input_field = (
                            ui.textarea(placeholder="Type your message...")
                            .props("autogrow borderless dense rows=1")
                            .classes("w-full")
                            .bind_value(controller, "draft")
                            .on_value_change(lambda _: update_controls())
                            .on("keydown.enter.prevent", send_message)
                        )
                    counter_label = ui.label(counter_text("")).classes("text-xs text-gray-400 pb-2")
                    stop_btn = (
                        ui.button(icon="stop", on_click=stop_generation)
                        .props("round unelevated color=grey")
                        .tooltip("Stop generating")
                    )
                    send_btn = (
                        ui.button(icon="send", on_click=send_message)
                        .props("round unelevated")
                        .classes("send-btn")
                    )
                ui.label(
                    "Gemini may display inaccurate info. Consider verifying important information."
                ).classes("text-xs text-gray-400 self-center")

    update_controls()

