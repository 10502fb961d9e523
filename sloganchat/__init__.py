"""Slogan Chat - streamed ad slogan generation in a single-page chat UI.

Combines httpx for streamed generation requests, NiceGUI for the interface,
FastAPI for hosting, and Pydantic for data validation.

Components:
    - streaming: Response body decoding (raw text and event-framed)
    - state: Conversation log and in-flight reply
    - generation: Request lifecycle, signing, prompt templating, config
    - ui: Web interface and message rendering
    - api: Application host
    - models: Shared schemas
"""

__version__ = "0.1.0"
