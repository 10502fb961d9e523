"""Test package for Slogan Chat.

Structure:
    - unit/: Decoder, state, rendering, config and signing tests
    - integration/: Request cycles against mocked streaming endpoints and
      the FastAPI host

Leverages pytest with pytest-asyncio and pytest-check for soft assertions.
"""
