"""Generation request pipeline.

Builds and signs the outgoing request, streams the reply from the remote
endpoint, and folds it into the conversation.

Responsibilities:
    - Endpoint configuration loaded from the environment
    - First-exchange slogan prompt templating
    - Request signing
    - Cancellable HTTP streaming
    - Request lifecycle state machine (submit, cancel, retry)
"""

from sloganchat.generation.config import ChatConfig, get_chat_config
from sloganchat.generation.controller import RequestController
from sloganchat.generation.transport import CancellationToken

__all__ = ["CancellationToken", "ChatConfig", "RequestController", "get_chat_config"]
