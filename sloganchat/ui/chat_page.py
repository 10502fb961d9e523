"""NiceGUI slogan generator page with streamed replies."""

import logging

from nicegui import ui

from sloganchat.generation.config import get_chat_config
from sloganchat.generation.controller import RequestController
from sloganchat.models.schemas import Message, RequestState, Role
from sloganchat.state.conversation import ConversationState
from sloganchat.ui.rendering import render_message, render_pending

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .reply-panel {
        background: linear-gradient(to bottom right, #fffbf0 0%, #caf5ec 100%);
        border-radius: 1rem;
    }

    .avatar-system { background: linear-gradient(to right, #d1d5db, #e5e7eb); }
    .avatar-user { background: linear-gradient(to right, #c084fc, #facc15); }
    .avatar-assistant { background: linear-gradient(to right, #fef08a, #86efac); }

    .generate-btn {
        border-radius: 1rem;
        background: linear-gradient(to right, #5dcab1, #47af96) !important;
        color: white !important;
    }

    .message-body strong { font-weight: 600; }
    .message-body em { font-style: italic; }
    .message-body code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-body a { color: #4f46e5; }
</style>
"""

_AVATAR_CLASSES = {
    Role.SYSTEM: "avatar-system",
    Role.USER: "avatar-user",
    Role.ASSISTANT: "avatar-assistant",
}

# Enter that confirms an IME composition (keyCode 229 on some browsers) must
# not submit; Shift+Enter is filtered out by the ``exact`` modifier.
SUBMIT_ON_ENTER = """(e) => {
    if (e.isComposing || e.keyCode === 229) return;
    e.preventDefault();
    emit();
}"""


@ui.page("/")
def chat_page() -> None:
    """Main slogan generator page."""
    ui.add_head_html(CUSTOM_CSS)
    conversation = ConversationState()
    controller = RequestController(conversation, config=get_chat_config())

    messages_container: ui.column
    pending_row: ui.row
    pending_html: ui.html
    loading_row: ui.row
    input_field: ui.textarea
    system_editor: ui.textarea
    system_row: ui.column
    action_buttons: list[ui.button] = []
    rendered_count = -1

    def render_bubble(message: Message, index: int) -> None:
        show_retry = message.role is Role.ASSISTANT and index == len(conversation.messages) - 1
        with ui.row().classes("w-full gap-3 items-start py-2"):
            ui.element("div").classes(
                f"shrink-0 w-7 h-7 mt-2 rounded-full {_AVATAR_CLASSES[message.role]}"
            )
            with ui.column().classes("flex-grow gap-1"):
                ui.html(
                    render_message(message, is_first_user_message=index == 0),
                    sanitize=False,
                ).classes("message-body text-sm leading-relaxed break-words")
                if show_retry:
                    ui.button("重新生成", icon="refresh", on_click=retry).props(
                        "flat dense size=sm"
                    )

    def refresh_messages() -> None:
        nonlocal rendered_count
        rendered_count = len(conversation.messages)
        messages_container.clear()
        with messages_container:
            if not conversation.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("campaign").classes("text-5xl text-gray-300")
                    ui.label("输入关键词开始生成文案").classes("text-lg text-gray-400")
            for index, message in enumerate(conversation.messages):
                render_bubble(message, index)

    def on_conversation_change() -> None:
        if len(conversation.messages) != rendered_count:
            refresh_messages()
        pending_html.set_content(render_pending(conversation.pending))
        pending_row.set_visibility(bool(conversation.pending))

    def on_state_change(state: RequestState) -> None:
        busy = state is not RequestState.IDLE
        loading_row.set_visibility(busy)
        for button in action_buttons:
            button.set_enabled(not busy and not controller.system_role_editing)
        if state is RequestState.FAILED and controller.last_error:
            ui.notify(controller.last_error, type="negative")

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or controller.busy or controller.system_role_editing:
            return
        input_field.value = ""
        await controller.submit(text)

    async def retry() -> None:
        await controller.retry()

    def stop() -> None:
        controller.cancel()

    def clear() -> None:
        if controller.busy or controller.system_role_editing:
            return
        input_field.value = ""
        conversation.reset()
        system_editor.value = ""

    def toggle_system_role() -> None:
        controller.system_role_editing = not controller.system_role_editing
        if not controller.system_role_editing:
            conversation.set_system_prompt(system_editor.value or "")
            logger.debug("System role updated")
        system_row.set_visibility(controller.system_role_editing)
        input_field.set_enabled(not controller.system_role_editing)
        for button in action_buttons:
            button.set_enabled(not controller.system_role_editing and not controller.busy)

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-5xl mx-auto app-container p-5 gap-4"),
    ):
        # Header
        with ui.row().classes("w-full items-center justify-between"):
            with ui.row().classes("items-baseline gap-2"):
                ui.label("关键词").classes("text-2xl font-bold")
                ui.label("(输入关键词|例如：KFC 炸鸡 七夕)").classes("text-gray-500")
            with ui.row().classes("gap-2"):
                ui.button("系统角色", icon="tune", on_click=toggle_system_role).props(
                    "outline dense"
                )
                action_buttons.append(
                    ui.button("清空", icon="delete_sweep", on_click=clear).props(
                        "outline dense"
                    )
                )
                action_buttons.append(
                    ui.button("重新生成", icon="refresh", on_click=retry).props(
                        "outline dense"
                    )
                )

        with ui.column().classes("w-full gap-2") as system_row:
            system_editor = ui.textarea(placeholder="设置系统角色...").props(
                "outlined autogrow"
            ).classes("w-full")
        system_row.set_visibility(False)

        with ui.row().classes("w-full gap-6 items-start no-wrap"):
            # Input
            with ui.column().classes("flex-1 items-center gap-4"):
                input_field = (
                    ui.textarea(placeholder="请输入关键词...")
                    .props("outlined rows=6 maxlength=300")
                    .classes("w-full")
                    .on(
                        "keydown.enter.exact",
                        send_message,
                        js_handler=SUBMIT_ON_ENTER,
                    )
                )
                action_buttons.append(
                    ui.button("生成文案", on_click=send_message).classes(
                        "generate-btn px-8"
                    )
                )

            # Replies
            with ui.scroll_area().classes("flex-1 reply-panel px-5").style("height: 40rem"):
                messages_container = ui.column().classes("w-full gap-1")
                with ui.row().classes("w-full gap-3 items-start py-2") as pending_row:
                    ui.element("div").classes(
                        f"shrink-0 w-7 h-7 mt-2 rounded-full {_AVATAR_CLASSES[Role.ASSISTANT]}"
                    )
                    pending_html = ui.html("", sanitize=False).classes(
                        "message-body text-sm leading-relaxed break-words flex-grow"
                    )
                pending_row.set_visibility(False)
                with ui.row().classes(
                    "w-full h-12 my-4 gap-4 items-center justify-center bg-gray-100 rounded"
                ) as loading_row:
                    ui.label("AI正在思考...").classes("text-gray-500")
                    ui.button("停止", on_click=stop).props("outline dense size=sm")
                loading_row.set_visibility(False)

    refresh_messages()
    conversation.subscribe(on_conversation_change)
    controller.add_listener(on_state_change)
