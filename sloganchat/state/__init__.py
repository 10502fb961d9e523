"""Conversation state shared between the request controller and the UI."""

from sloganchat.state.conversation import ConversationState

__all__ = ["ConversationState"]
