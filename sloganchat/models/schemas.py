from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Speaker of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class RequestState(str, Enum):
    """Lifecycle states of a single generation request."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    ARCHIVED = "archived"
    ABORTED = "aborted"
    FAILED = "failed"


class StreamMode(str, Enum):
    """Shape of the upstream response body.

    RAW: plain text chunks relayed by a proxy.
    EVENTS: event-framed ``data:`` records from an OpenAI-compatible API.
    """

    RAW = "raw"
    EVENTS = "events"


class Message(BaseModel):
    """A single chat message in the conversation.

    Attributes:
        role: The speaker (system, user or assistant).
        content: The message text.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class GenerateRequest(BaseModel):
    """Request payload sent to the generation endpoint.

    Attributes:
        messages: Full conversation, system prompt first when set.
        time: Request timestamp in epoch milliseconds.
        sign: Signature over the timestamp and last message content.
    """

    messages: list[Message]
    time: int
    sign: str


class DirectGenerateRequest(GenerateRequest):
    """Payload for talking to an OpenAI-compatible API directly."""

    model: str
    temperature: float = Field(ge=0.0, le=2.0)
    stream: bool = True


class Delta(BaseModel):
    content: str | None = None


class Choice(BaseModel):
    delta: Delta | None = None


class CompletionChunk(BaseModel):
    """One event-framed payload of a streamed chat completion."""

    choices: list[Choice] = Field(..., min_length=1)

    @property
    def text(self) -> str:
        delta = self.choices[0].delta
        return (delta and delta.content) or ""
