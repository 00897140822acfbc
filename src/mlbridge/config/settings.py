"""
Typed client settings using Pydantic.

All configuration is defined here with explicit typing and validation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BackendConfig(BaseModel):
    """Connection settings for the backend gateway."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(
        default="http://127.0.0.1:8787", description="Gateway root URL"
    )
    timeout_s: float | None = Field(
        default=None,
        gt=0,
        description="Per-call timeout in seconds (None blocks until the job ends)",
    )
    verify_tls: bool = Field(default=True)
    headers: dict[str, str] = Field(
        default_factory=dict, description="Extra HTTP headers, e.g. Authorization"
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure the URL has an http(s) scheme."""
        if not v.startswith(("http://", "https://")):
            msg = f"base_url must start with http:// or https://, got: {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unknown log level: {v!r}"
            raise ValueError(msg)
        return level


class ClientSettings(BaseModel):
    """Complete client configuration."""

    model_config = ConfigDict(frozen=True)

    backend: BackendConfig = Field(default_factory=BackendConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
