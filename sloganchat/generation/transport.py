"""HTTP transport for streamed generation requests.

Wraps httpx streaming with cooperative cancellation. Every network wait
(the initial response and each body chunk) is raced against a
``CancellationToken``; when the token fires first the wait is abandoned and
``RequestAborted`` is raised, which callers treat differently from a
``TransportFailure``.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import httpx

from sloganchat.errors import RequestAborted, TransportFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """Cancellation signal for one request."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestAborted("Request cancelled")

    async def race(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        A result that is already available wins over a simultaneous cancel,
        so cancellation lands on the next await.

        Raises:
            RequestAborted: If the token fired before the awaitable finished.
        """
        self.raise_if_cancelled()
        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            waiter.cancel()
            if not work.done():
                work.cancel()
                await asyncio.wait({work})
        if work in done:
            return work.result()
        raise RequestAborted("Request cancelled")


async def _next_chunk(chunks: AsyncIterator[bytes]) -> bytes | None:
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None


async def _iter_chunks(
    response: httpx.Response,
    token: CancellationToken,
) -> AsyncGenerator[bytes]:
    chunks = response.aiter_bytes()
    try:
        while True:
            try:
                chunk = await token.race(_next_chunk(chunks))
            except (httpx.HTTPError, httpx.StreamError) as e:
                raise TransportFailure(f"Stream interrupted: {e}") from e
            if chunk is None:
                return
            yield chunk
    finally:
        await chunks.aclose()


@asynccontextmanager
async def open_stream(
    client: httpx.AsyncClient,
    url: str,
    payload: dict[str, Any],
    token: CancellationToken,
    headers: dict[str, str] | None = None,
) -> AsyncGenerator[AsyncIterator[bytes]]:
    """POST ``payload`` and yield the response body as a chunk iterator.

    Args:
        client: HTTP client used for the request.
        url: Generation endpoint.
        payload: JSON body.
        token: Cancellation token for this request.
        headers: Extra request headers.

    Yields:
        Async iterator over raw body chunks.

    Raises:
        TransportFailure: On connection errors or a non-success status.
        RequestAborted: If the token fires while waiting on the network.
    """
    request = client.build_request("POST", url, json=payload, headers=headers)
    try:
        response = await token.race(client.send(request, stream=True))
    except httpx.HTTPError as e:
        raise TransportFailure(f"Connection failed: {e}") from e

    try:
        if not response.is_success:
            raise TransportFailure(
                f"HTTP {response.status_code} {response.reason_phrase}".strip(),
                status_code=response.status_code,
            )
        logger.debug(f"Streaming response from {url} ({response.status_code})")
        chunks = _iter_chunks(response, token)
        try:
            yield chunks
        finally:
            await chunks.aclose()
    finally:
        await response.aclose()
