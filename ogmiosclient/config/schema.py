"""Configuration schema using Pydantic.

Persisted as camelCase JSON in ~/.ogmiosclient/config.json; every field can
also be set from the environment, e.g. ``OGMIOS_CONNECTION__WS_URL``.
"""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


class ConnectionConfig(BaseModel):
    """Where the Ogmios server lives and how to reach it."""
    http_url: str = "http://localhost:1337"
    ws_url: str = "ws://localhost:1337"
    http_timeout: float = 30.0  # Seconds per one-shot HTTP call
    open_timeout: float | None = 10.0  # WebSocket handshake timeout
    max_message_size: int | None = 2**24  # Bytes; None disables the limit


class CallsConfig(BaseModel):
    """Per-call policy on the duplex connection."""
    timeout: float | None = None  # Seconds to wait for a response; None waits forever
    pending_ttl: float | None = None  # Evict unclaimed buffered responses older than this


class LoggingConfig(BaseModel):
    level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    file: str | None = None  # Name of a rotating log under ~/.ogmiosclient/logs, without ".log"


class Config(BaseSettings):
    """Root configuration for ogmiosclient."""
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    calls: CallsConfig = Field(default_factory=CallsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="OGMIOS_",
        env_nested_delimiter="__",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats the config file, which is passed in as init kwargs.
        return env_settings, init_settings, dotenv_settings, file_secret_settings
