"""Generation client configuration with environment variable loading.

Pydantic-based configuration for reaching the text-generation endpoint.
Supports a plain-text proxy or an OpenAI-compatible API called directly.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from sloganchat.models.schemas import StreamMode

# Load environment variables from .env file
load_dotenv()


class ChatConfig(BaseModel):
    """Configuration for the generation request pipeline.

    Attributes:
        endpoint_url: URL receiving the POSTed conversation.
        stream_mode: How the response body is framed (raw text or events).
        api_key: Bearer token, required when calling an API directly.
        model_name: Model identifier sent in direct mode.
        temperature: Sampling temperature sent in direct mode.
        sign_secret: Secret mixed into request signatures.
        connect_timeout: Seconds allowed to establish the connection.
    """

    endpoint_url: str = Field(
        default_factory=lambda: os.getenv(
            "GENERATE_URL", "http://localhost:3000/api/generate"
        ),
        validate_default=True,
        description="Generation endpoint URL",
    )
    stream_mode: StreamMode = Field(
        default_factory=lambda: os.getenv("STREAM_MODE", "raw").lower(),
        validate_default=True,
        description="Response body framing: 'raw' or 'events'",
    )
    api_key: str = Field(
        default_factory=lambda: os.getenv("LLM_API_KEY", os.getenv("OPENAI_API_KEY", "")),
        validate_default=True,
        description="API key for direct mode",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-3.5-turbo"),
        description="Model to use in direct mode",
    )
    temperature: float = Field(
        default=0.6,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for direct mode",
    )
    sign_secret: str = Field(
        default_factory=lambda: os.getenv("SIGN_SECRET_KEY", ""),
        description="Secret used by the default request signer",
    )
    connect_timeout: float = Field(
        default_factory=lambda: os.getenv("CONNECT_TIMEOUT", "10.0"),
        validate_default=True,
        gt=0.0,
        description="Connection timeout in seconds (reads are not limited)",
    )

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("GENERATE_URL must be an http:// or https:// URL")
        return v

    @field_validator("api_key")
    @classmethod
    def strip_api_key(cls, v: str) -> str:
        return v.strip()

    @model_validator(mode="after")
    def require_key_for_direct_mode(self) -> "ChatConfig":
        """Direct API calls are authenticated with a bearer key."""
        if self.stream_mode is StreamMode.EVENTS and not self.api_key:
            raise ValueError(
                "API key required in events mode. Set LLM_API_KEY or OPENAI_API_KEY in .env"
            )
        return self


def get_chat_config() -> ChatConfig:
    """Create generation configuration from environment.

    Returns:
        Configured ChatConfig instance.

    Raises:
        ValidationError: If the environment holds invalid values.
    """
    return ChatConfig()
