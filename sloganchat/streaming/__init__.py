"""Response body decoding for streamed generation.

Converts raw HTTP body chunks into ordered text fragments, for both plain
text proxies and event-framed completion APIs.
"""

from sloganchat.streaming.decoder import DONE_SENTINEL, StreamDecoder

__all__ = ["DONE_SENTINEL", "StreamDecoder"]
