"""Pytest fixtures and shared test configuration.

Fixtures:
    - conversation: Fresh ConversationState
    - raw_config / events_config: Endpoint configurations for both body shapes
    - signer: Deterministic signer bound to a test secret
    - make_client: Builds an httpx client answering from a streamed mock body
    - async_client: HTTPX client for the FastAPI app
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from sloganchat.api import app
from sloganchat.generation.config import ChatConfig
from sloganchat.generation.signing import Signer, make_signer
from sloganchat.models.schemas import StreamMode
from sloganchat.state.conversation import ConversationState
from tests.helpers import ENDPOINT, SECRET


@pytest.fixture
def conversation() -> ConversationState:
    return ConversationState()


@pytest.fixture
def raw_config() -> ChatConfig:
    return ChatConfig(
        endpoint_url=ENDPOINT,
        stream_mode=StreamMode.RAW,
        sign_secret=SECRET,
    )


@pytest.fixture
def events_config() -> ChatConfig:
    return ChatConfig(
        endpoint_url=ENDPOINT,
        stream_mode=StreamMode.EVENTS,
        api_key="sk-test-key",
        model_name="gpt-3.5-turbo",
        sign_secret=SECRET,
    )


@pytest.fixture
def signer() -> Signer:
    return make_signer(SECRET)


@pytest.fixture
async def make_client() -> AsyncGenerator[Callable[..., httpx.AsyncClient]]:
    """Factory for clients backed by ``httpx.MockTransport``.

    The handler receives the outgoing request and returns an
    ``httpx.Response`` (sync or async). Clients are closed after the test.

    Yields:
        Function mapping a handler to a ready AsyncClient.
    """
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        await client.aclose()


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
