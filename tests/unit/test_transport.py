"""Unit tests for CancellationToken and the streaming transport."""

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from sloganchat.errors import RequestAborted, TransportFailure
from sloganchat.generation.transport import CancellationToken, open_stream
from tests.helpers import ENDPOINT, stream_body


class TestCancellationToken:
    """Tests for racing awaits against cancellation."""

    async def test_race_returns_result(self) -> None:
        token = CancellationToken()

        async def work() -> str:
            return "chunk"

        assert await token.race(work()) == "chunk"

    async def test_race_fails_fast_when_already_cancelled(self) -> None:
        token = CancellationToken()
        token.cancel()

        async def work() -> str:
            return "never awaited"

        coro = work()
        with pytest.raises(RequestAborted):
            await token.race(coro)
        coro.close()

    async def test_cancel_interrupts_pending_await(self) -> None:
        """A wait that never finishes is abandoned once the token fires."""
        token = CancellationToken()
        interrupted = asyncio.Event()

        async def slow_read() -> bytes:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                interrupted.set()
                raise
            return b""

        asyncio.get_running_loop().call_later(0.01, token.cancel)

        with pytest.raises(RequestAborted):
            await asyncio.wait_for(token.race(slow_read()), timeout=5)
        assert interrupted.is_set()
        assert token.cancelled is True

    async def test_race_propagates_errors(self) -> None:
        token = CancellationToken()

        async def failing() -> None:
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await token.race(failing())


class TestOpenStream:
    """Tests for the HTTP streaming context manager."""

    async def test_yields_body_chunks(
        self, make_client: Callable[..., httpx.AsyncClient]
    ) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = request.content
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, content=stream_body(b"one", b"two"))

        client = make_client(handler)
        async with open_stream(
            client,
            ENDPOINT,
            {"messages": []},
            CancellationToken(),
            headers={"Authorization": "Bearer sk"},
        ) as chunks:
            received = [chunk async for chunk in chunks]

        assert received == [b"one", b"two"]
        assert seen["method"] == "POST"
        assert json.loads(seen["body"]) == {"messages": []}
        assert seen["auth"] == "Bearer sk"

    async def test_non_success_status_raises(
        self, make_client: Callable[..., httpx.AsyncClient]
    ) -> None:
        client = make_client(lambda request: httpx.Response(429, text="slow down"))

        with pytest.raises(TransportFailure) as exc_info:
            async with open_stream(client, ENDPOINT, {}, CancellationToken()):
                pass

        assert exc_info.value.status_code == 429
        assert "429" in str(exc_info.value)

    async def test_connection_error_raises_transport_failure(
        self, make_client: Callable[..., httpx.AsyncClient]
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(TransportFailure) as exc_info:
            async with open_stream(client, ENDPOINT, {}, CancellationToken()):
                pass

        assert exc_info.value.status_code is None
        assert "Connection failed" in str(exc_info.value)
