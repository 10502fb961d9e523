"""Helpers for building streamed response bodies in tests."""

import json
from collections.abc import AsyncIterator

ENDPOINT = "http://generator.test/api/generate"
SECRET = "test-secret"


async def stream_body(*chunks: bytes) -> AsyncIterator[bytes]:
    """Yield response body chunks exactly as given."""
    for chunk in chunks:
        yield chunk


def sse_event(content: str | None) -> bytes:
    """Encode one event-framed completion record."""
    delta = {} if content is None else {"content": content}
    payload = json.dumps({"choices": [{"delta": delta}]}, ensure_ascii=False)
    return f"data: {payload}\n\n".encode()
