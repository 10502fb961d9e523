"""NiceGUI interface - thin visualization layer for the slogan generator.

Responsibilities:
    - Keyword input and generate/clear/retry/stop controls
    - Rendering of the message log and the streaming reply
    - System role editor

Holds no conversation logic of its own. Subscribes to ConversationState and
RequestController notifications.
"""
