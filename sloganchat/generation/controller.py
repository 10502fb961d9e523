"""Request controller for streamed slogan generation.

Drives one request/response cycle at a time through an explicit state
machine:

    IDLE -> SENDING -> STREAMING -> (ARCHIVED | ABORTED | FAILED) -> IDLE

Design notes:

1. **One request per controller** - ``submit`` and ``retry`` are ignored while
   a request is outstanding, even if the UI forgot to disable its buttons.

2. **Cancel keeps, failure discards** - a user cancel archives whatever text
   already streamed in. A transport or decode failure drops the partial reply.

3. **No escaping exceptions** - failures end in the FAILED state and are
   reported through ``last_outcome``/``last_error`` so the UI stays usable.
"""

import asyncio
import logging
import time
from collections.abc import Callable

import httpx

from sloganchat.errors import GenerationError, RequestAborted
from sloganchat.generation.config import ChatConfig, get_chat_config
from sloganchat.generation.prompts import build_slogan_prompt
from sloganchat.generation.signing import Signer, make_signer
from sloganchat.generation.transport import CancellationToken, open_stream
from sloganchat.models.schemas import (
    DirectGenerateRequest,
    GenerateRequest,
    RequestState,
    Role,
    StreamMode,
)
from sloganchat.state.conversation import ConversationState
from sloganchat.streaming.decoder import StreamDecoder

logger = logging.getLogger(__name__)

StateListener = Callable[[RequestState], None]


class RequestController:
    """Orchestrates submit, stream, cancel and retry for one conversation."""

    def __init__(
        self,
        conversation: ConversationState,
        config: ChatConfig | None = None,
        signer: Signer | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            conversation: State container this controller writes into.
            config: Endpoint configuration. Loads from environment if not provided.
            signer: Request signing function. Defaults to a SHA-256 signer
                    keyed with ``config.sign_secret``.
            client: Shared HTTP client. A short-lived client is created per
                    request when omitted.
        """
        self.conversation = conversation
        self._config = config or get_chat_config()
        self._signer = signer or make_signer(self._config.sign_secret)
        self._client = client
        self._token: CancellationToken | None = None
        self._listeners: list[StateListener] = []

        self.state: RequestState = RequestState.IDLE
        self.system_role_editing: bool = False
        self.last_outcome: RequestState | None = None
        self.last_error: str | None = None

    @property
    def busy(self) -> bool:
        return self.state is not RequestState.IDLE or self.conversation.in_flight

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback receiving every state transition."""
        self._listeners.append(listener)

    def _transition(self, state: RequestState) -> None:
        logger.debug(f"Request state {self.state.value} -> {state.value}")
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    async def submit(self, user_text: str) -> RequestState | None:
        """Append a user message and stream the assistant reply.

        On an empty conversation the text is treated as a product keyword and
        wrapped into the slogan prompt. A trailing user message left behind by
        a failed request is replaced, so roles keep alternating.

        Args:
            user_text: Raw text typed by the user.

        Returns:
            The terminal state of the request, or None if the submit was
            rejected (empty text, system role being edited, or busy).
        """
        text = user_text.strip()
        if not text:
            logger.debug("Ignoring empty submit")
            return None
        if self.system_role_editing or self.busy:
            logger.debug("Submit rejected: controller is not ready")
            return None

        if self.conversation.drop_unanswered_user_message():
            logger.debug("Replacing unanswered user message")
        if not self.conversation.messages:
            text = build_slogan_prompt(text)
        self.conversation.append_user(text)
        return await self._run()

    async def retry(self) -> RequestState | None:
        """Regenerate the last assistant reply.

        When the last request failed and left the user message unanswered,
        that message is resent as is.

        Returns:
            The terminal state of the request, or None when the log is empty
            or the controller is busy.
        """
        if self.system_role_editing or self.busy:
            logger.debug("Retry rejected: controller is not ready")
            return None
        last = self.conversation.last_message
        if last is None:
            logger.debug("Retry rejected: nothing to regenerate")
            return None

        if last.role is Role.ASSISTANT:
            self.conversation.drop_last_assistant_message()
        return await self._run()

    def cancel(self) -> bool:
        """Abort the outstanding request.

        Returns:
            True if a request was sending or streaming and is now aborting.
        """
        if self._token is None or self.state not in (
            RequestState.SENDING,
            RequestState.STREAMING,
        ):
            return False
        logger.info("Cancelling generation request")
        self._token.cancel()
        return True

    def _build_request(self) -> tuple[dict, dict[str, str]]:
        messages = self.conversation.request_messages()
        timestamp = int(time.time() * 1000)
        last_content = messages[-1].content if messages else ""
        sign = self._signer(timestamp, last_content)

        headers = {"Content-Type": "application/json"}
        if self._config.stream_mode is StreamMode.EVENTS:
            body = DirectGenerateRequest(
                messages=messages,
                time=timestamp,
                sign=sign,
                model=self._config.model_name,
                temperature=self._config.temperature,
            )
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        else:
            body = GenerateRequest(messages=messages, time=timestamp, sign=sign)
        return body.model_dump(mode="json"), headers

    async def _run(self) -> RequestState:
        token = CancellationToken()
        self._token = token
        self.last_error = None
        self._transition(RequestState.SENDING)
        self.conversation.begin_assistant_response()

        try:
            payload, headers = self._build_request()
            if self._client is not None:
                await self._stream(self._client, payload, headers, token)
            else:
                timeout = httpx.Timeout(None, connect=self._config.connect_timeout)
                async with httpx.AsyncClient(timeout=timeout) as client:
                    await self._stream(client, payload, headers, token)
        except RequestAborted:
            archived = self.conversation.finalize_assistant_response()
            chars = len(archived.content) if archived else 0
            logger.info(f"Generation aborted by user, kept {chars} chars")
            outcome = RequestState.ABORTED
        except GenerationError as e:
            logger.warning(f"Generation failed: {e}")
            self.conversation.abandon_assistant_response()
            self.last_error = str(e)
            outcome = RequestState.FAILED
        except asyncio.CancelledError:
            # Owning task torn down (page closed): keep what arrived, then unwind.
            self.conversation.finalize_assistant_response()
            self._token = None
            self._finish(RequestState.ABORTED)
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during generation: {e}")
            self.conversation.abandon_assistant_response()
            self.last_error = f"Unexpected error: {e}"
            outcome = RequestState.FAILED
        else:
            self.conversation.finalize_assistant_response()
            logger.info("Generation completed")
            outcome = RequestState.ARCHIVED
        finally:
            self._token = None

        self._finish(outcome)
        return outcome

    async def _stream(
        self,
        client: httpx.AsyncClient,
        payload: dict,
        headers: dict[str, str],
        token: CancellationToken,
    ) -> None:
        decoder = StreamDecoder(self._config.stream_mode)
        async with open_stream(
            client, self._config.endpoint_url, payload, token, headers=headers
        ) as chunks:
            self._transition(RequestState.STREAMING)
            async for fragment in decoder.decode(chunks):
                self.conversation.append_pending_fragment(fragment)

    def _finish(self, outcome: RequestState) -> None:
        self.last_outcome = outcome
        self._transition(outcome)
        self._transition(RequestState.IDLE)
