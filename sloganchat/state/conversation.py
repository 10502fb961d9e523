"""Conversation state container.

Single owner of everything the chat view renders: the message log, the
optional system prompt, and the assistant reply currently streaming in.
Views subscribe to change notifications instead of keeping their own copies.
"""

import logging
from collections.abc import Callable

from sloganchat.models.schemas import Message, Role

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ConversationState:
    """Ordered message log plus the in-flight partial assistant reply."""

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self.system_prompt: str = ""
        self.pending: str = ""
        self.in_flight: bool = False
        self._listeners: list[Listener] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def last_message(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked after every state change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def set_system_prompt(self, text: str) -> None:
        self.system_prompt = text.strip()
        self._notify()

    def append_user(self, text: str) -> bool:
        """Append a user message.

        Args:
            text: The message content.

        Returns:
            False when the text is empty or whitespace-only (nothing changes).
        """
        if not text or not text.strip():
            return False
        self._messages.append(Message(role=Role.USER, content=text))
        self._notify()
        return True

    def begin_assistant_response(self) -> None:
        self.pending = ""
        self.in_flight = True
        self._notify()

    def append_pending_fragment(self, text: str) -> None:
        if not text:
            return
        self.pending += text
        self._notify()

    def finalize_assistant_response(self) -> Message | None:
        """Archive the pending reply as an assistant message.

        A request aborted before any text arrived archives nothing and only
        clears the in-flight flag.

        Returns:
            The archived message, or None if nothing was pending.
        """
        archived = None
        if self.pending:
            archived = Message(role=Role.ASSISTANT, content=self.pending)
            self._messages.append(archived)
        self.pending = ""
        self.in_flight = False
        self._notify()
        return archived

    def abandon_assistant_response(self) -> None:
        """Discard the pending reply without archiving it."""
        if self.pending:
            logger.debug(f"Discarding {len(self.pending)} chars of partial reply")
        self.pending = ""
        self.in_flight = False
        self._notify()

    def drop_last_assistant_message(self) -> bool:
        if self._messages and self._messages[-1].role is Role.ASSISTANT:
            self._messages.pop()
            self._notify()
            return True
        return False

    def drop_unanswered_user_message(self) -> bool:
        """Remove a trailing user message that never received a reply."""
        if self._messages and self._messages[-1].role is Role.USER:
            self._messages.pop()
            self._notify()
            return True
        return False

    def request_messages(self) -> list[Message]:
        """Messages to send upstream, system prompt first when set."""
        messages = list(self._messages)
        if self.system_prompt:
            messages.insert(0, Message(role=Role.SYSTEM, content=self.system_prompt))
        return messages

    def reset(self) -> None:
        self._messages.clear()
        self.pending = ""
        self.system_prompt = ""
        self.in_flight = False
        self._notify()
