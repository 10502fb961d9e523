"""Pydantic models shared across the generation pipeline.

Models:
    - Message: Immutable chat message (role + content)
    - GenerateRequest: Outgoing payload for the proxy endpoint
    - DirectGenerateRequest: Outgoing payload for an OpenAI-compatible API
    - CompletionChunk: One event-framed streaming payload
    - RequestState / StreamMode / Role: Enumerations
"""

from sloganchat.models.schemas import (
    Choice,
    CompletionChunk,
    Delta,
    DirectGenerateRequest,
    GenerateRequest,
    Message,
    RequestState,
    Role,
    StreamMode,
)

__all__ = [
    "Choice",
    "CompletionChunk",
    "Delta",
    "DirectGenerateRequest",
    "GenerateRequest",
    "Message",
    "RequestState",
    "Role",
    "StreamMode",
]
