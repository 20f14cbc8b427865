"""Pydantic configuration model for the CMDB client.

Only used at construction time; the request hot path works with plain
dicts and the frozen dataclasses from wire.py.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientConfig(BaseModel):
    """Configuration for ApiClient.

    Attributes:
        url: JSON-RPC endpoint, e.g. ``https://cmdb.example.com/src/jsonrpc.php``
        api_key: API key sent as ``apikey`` in every call's params
        language: Optional language sent as ``language`` in every call's params
        timeout: Total timeout per round trip in seconds (must be positive)
        username: Optional user name for ``login()``
        password: Optional password for ``login()``
        headers: Extra HTTP headers sent with every request
    """

    model_config = ConfigDict(
        frozen=False,
        extra="forbid",
    )

    url: str = Field(..., description="JSON-RPC endpoint URL")
    api_key: str = Field(..., description="API key")
    language: str | None = Field(default=None, description="Response language")
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds"
    )
    username: str | None = None
    password: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format (HTTP only)."""
        if not v:
            raise ValueError("URL cannot be empty")

        valid_schemes = ("http://", "https://")
        if not any(v.startswith(scheme) for scheme in valid_schemes):
            raise ValueError(
                f"URL must start with one of: {', '.join(valid_schemes)}"
            )
        return v

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("API key cannot be empty")
        return v
