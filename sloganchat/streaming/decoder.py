"""Streaming body decoder.

Turns the byte chunks of a generation response into text fragments.

Two upstream shapes are supported:

1. **Raw chunks** - a proxy relays plain UTF-8 text. Every chunk becomes one
   fragment, except a lone newline arriving right after a newline, which the
   upstream formatter emits as noise.

2. **Event-framed** - an OpenAI-compatible API sends ``data:`` records
   separated by blank lines. Each payload is a JSON completion chunk whose
   first choice carries the next piece of text. The literal ``[DONE]`` ends
   the stream.

Chunks may split a multi-byte character or an event record anywhere, so the
decoder keeps undecoded bytes and unfinished lines between reads. A decoder
instance serves exactly one response.
"""

import codecs
import json
import logging
import re
from collections.abc import AsyncIterable, AsyncIterator

from pydantic import ValidationError

from sloganchat.errors import StreamDecodeError
from sloganchat.models.schemas import CompletionChunk, StreamMode

logger = logging.getLogger(__name__)

DONE_SENTINEL = "[DONE]"

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class StreamDecoder:
    """Incremental bytes-to-fragments decoder for one response body."""

    def __init__(self, mode: StreamMode = StreamMode.RAW) -> None:
        self.mode = StreamMode(mode)
        self.done = False
        self._text = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._ends_with_newline = False
        # Event-framed carry-over
        self._line_buffer = ""
        self._data_lines: list[str] = []
        self._error: StreamDecodeError | None = None

    def feed(self, chunk: bytes) -> list[str]:
        """Decode one chunk of the body.

        Args:
            chunk: Raw bytes as read from the transport.

        Returns:
            Fragments completed by this chunk, in arrival order.

        Raises:
            StreamDecodeError: If an event payload is malformed.
        """
        self._raise_pending_error()
        if self.done:
            return []
        text = self._text.decode(chunk)
        if self.mode is StreamMode.RAW:
            return self._raw_fragments(text)
        return self._event_fragments(text, final=False)

    def finish(self) -> list[str]:
        """Flush carry-over once the body has ended."""
        self._raise_pending_error()
        if self.done:
            return []
        text = self._text.decode(b"", final=True)
        if self.mode is StreamMode.RAW:
            fragments = self._raw_fragments(text)
        else:
            fragments = self._event_fragments(text, final=True)
        self.done = True
        return fragments

    async def decode(self, chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
        """Lazily map a chunk stream to fragments.

        Stops early when the event stream signals completion.
        """
        async for chunk in chunks:
            for fragment in self.feed(chunk):
                yield fragment
            if self.done:
                logger.debug("Stream completion sentinel received")
                return
        for fragment in self.finish():
            yield fragment
        self._raise_pending_error()

    def _raise_pending_error(self) -> None:
        if self._error is not None:
            error, self._error = self._error, None
            raise error

    def _raw_fragments(self, text: str) -> list[str]:
        if not text:
            return []
        if text == "\n" and self._ends_with_newline:
            return []
        self._ends_with_newline = text.endswith("\n")
        return [text]

    def _event_fragments(self, text: str, final: bool) -> list[str]:
        buffer = self._line_buffer + text
        # A trailing "\r" may still be the first half of "\r\n".
        held = ""
        if not final and buffer.endswith("\r"):
            buffer, held = buffer[:-1], "\r"
        lines = _LINE_BREAK.split(buffer)
        self._line_buffer = lines.pop() + held
        if final:
            if self._line_buffer:
                lines.append(self._line_buffer)
            self._line_buffer = ""
            lines.append("")

        fragments: list[str] = []
        for line in lines:
            if line == "":
                try:
                    fragment = self._dispatch()
                except StreamDecodeError as e:
                    if not fragments:
                        raise
                    # Hand out what decoded cleanly; fail on the next read.
                    self._error = e
                    break
                if self.done:
                    break
                if fragment:
                    fragments.append(fragment)
                continue
            if line.startswith(":"):
                continue
            field, _, value = line.partition(":")
            if field == "data":
                self._data_lines.append(value[1:] if value.startswith(" ") else value)
        return fragments

    def _dispatch(self) -> str:
        if not self._data_lines:
            return ""
        payload = "\n".join(self._data_lines)
        self._data_lines = []

        if payload == DONE_SENTINEL:
            self.done = True
            self._line_buffer = ""
            return ""

        try:
            chunk = CompletionChunk.model_validate(json.loads(payload))
        except (json.JSONDecodeError, ValidationError) as e:
            raise StreamDecodeError(f"Malformed stream payload: {payload[:200]!r}") from e
        return chunk.text
