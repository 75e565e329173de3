"""
@file: config.py
@description:
This module provides centralized configuration management for the blobstash service.
Settings are read from environment variables (and an optional .env file) and validated
once at startup; any invalid value is a startup fault.

The configuration includes settings for:
- Database connection and pool sizing
- CORS allowed origin
- Listen address
- Admission control (maximum concurrent in-flight requests)
- Logging level

@dependencies:
- pydantic: For settings validation
- pydantic_settings: For environment variable loading

@notes:
- DATABASE_URL has no default; a missing value fails validation
- LISTEN accepts `ip:port`, with IPv6 hosts in brackets (e.g. `[::]:2799`)
- The admission limit and the database pool are sized independently
"""

import ipaddress
from functools import lru_cache
from typing import Tuple

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LISTEN = "[::]:2799"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def parse_listen_address(value: str) -> Tuple[str, int]:
    """
    Split a listen address into host and port.

    Args:
        value: Address in `ip:port` form; IPv6 hosts must be bracketed

    Returns:
        Tuple[str, int]: The bare IP host and the port number

    Raises:
        ValueError: If the address is not a literal IP with a valid port
    """
    host, sep, port = value.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"invalid socket address syntax: {value!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise ValueError(f"IPv6 listen address must be bracketed: {value!r}")

    try:
        ipaddress.ip_address(host)
    except ValueError:
        raise ValueError(f"listen host is not an IP address: {host!r}") from None

    if not port.isdigit() or int(port) > 65535:
        raise ValueError(f"invalid listen port: {port!r}")

    return host, int(port)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Provides typed access to all configuration parameters used by the service.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = Field(default=10, gt=0)
    DB_MAX_OVERFLOW: int = Field(default=20, ge=0)
    DB_POOL_RECYCLE: int = Field(default=300)

    # HTTP surface
    CORS_ORIGIN: str = Field(default="*")
    LISTEN: str = Field(default=DEFAULT_LISTEN)
    CONCURRENCY: int = Field(default=100, gt=0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    @field_validator("DATABASE_URL")
    @classmethod
    def check_database_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("`DATABASE_URL` not set")
        return v

    @field_validator("CORS_ORIGIN")
    @classmethod
    def check_cors_origin(cls, v: str) -> str:
        """
        The origin is sent verbatim as a header value, so it may only hold
        visible ASCII, spaces and tabs.
        """
        if any(not (c == "\t" or " " <= c <= "~") for c in v):
            raise ValueError("failed to parse `CORS_ORIGIN`")
        return v

    @field_validator("LISTEN")
    @classmethod
    def check_listen(cls, v: str) -> str:
        parse_listen_address(v)
        return v.strip()

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}")
        return level

    @property
    def listen_host(self) -> str:
        return parse_listen_address(self.LISTEN)[0]

    @property
    def listen_port(self) -> int:
        return parse_listen_address(self.LISTEN)[1]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the cached settings instance, reading the environment on first use.
    """
    return Settings()
