"""Default request signer.

The endpoint authenticates requests with a signature over the request
timestamp and the content of the last message. Any callable with the
``Signer`` shape can be passed to the controller instead.
"""

import hashlib
from collections.abc import Callable

Signer = Callable[[int, str], str]


def make_signer(secret: str) -> Signer:
    """Build a SHA-256 signer bound to a shared secret.

    Args:
        secret: Secret shared with the endpoint (may be empty).

    Returns:
        Function mapping (timestamp_ms, content) to a hex digest of
        ``"{timestamp}:{content}:{secret}"``.
    """

    def sign(timestamp: int, content: str) -> str:
        sign_text = f"{timestamp}:{content}:{secret}"
        return hashlib.sha256(sign_text.encode("utf-8")).hexdigest()

    return sign
