"""Exceptions raised by the generation pipeline."""


class GenerationError(Exception):
    """Base class for failures of a generation request."""

    pass


class TransportFailure(GenerationError):
    """Raised when the HTTP exchange fails or returns a non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RequestAborted(GenerationError):
    """Raised when a request is cancelled through its token."""

    pass


class StreamDecodeError(GenerationError):
    """Raised when an event-framed payload cannot be parsed."""

    pass
