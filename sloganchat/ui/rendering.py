"""Message to markup rendering.

Pure functions called on every conversation change, including while the
assistant reply is still streaming in.
"""

from collections.abc import Callable

from sloganchat.generation.prompts import strip_slogan_prompt
from sloganchat.models.schemas import Message, Role
from sloganchat.ui.markdown import markdown_to_html

MarkdownRenderer = Callable[[str], str]


def render_message(
    message: Message,
    is_first_user_message: bool = False,
    markdown: MarkdownRenderer = markdown_to_html,
) -> str:
    """Render a message as HTML.

    The first message of a conversation carries the slogan prompt template;
    only the product keyword inside it is shown.

    Args:
        message: Message to render, possibly a partial reply.
        is_first_user_message: Whether this is the first message in the log.
        markdown: Markdown to HTML converter.

    Returns:
        HTML markup for the message body.
    """
    content = message.content
    if is_first_user_message:
        content = strip_slogan_prompt(content)
    return markdown(content)


def render_pending(text: str, markdown: MarkdownRenderer = markdown_to_html) -> str:
    return render_message(Message(role=Role.ASSISTANT, content=text), markdown=markdown)
