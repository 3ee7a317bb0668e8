"""Environment-driven settings for the storefront client."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


def _str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"true", "1", "yes", "y"}


def _number(name: str, default: str, cast: type[int] | type[float]) -> int | float:
    raw = os.getenv(name, default)
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {raw!r}")
    return value


@dataclass(slots=True)
class Settings:
    api_base_url: str = "http://localhost:8080"
    storage_url: str = "sqlite+aiosqlite:///storefront.db"
    request_timeout: float = 10.0
    retry_times: int = 1
    retry_delay: float = 0.2
    confirmation_delay: float = 2.0
    mock_gateway: bool = True
    checkout_lease: bool = False
    log_level: str = "INFO"
    log_json: bool = False


def load_settings() -> Settings:
    """Load environment variables (and .env) into typed settings."""
    load_dotenv(find_dotenv(usecwd=True))

    return Settings(
        api_base_url=os.getenv("STOREFRONT_API_URL", "http://localhost:8080").rstrip("/"),
        storage_url=os.getenv("STOREFRONT_STORAGE_URL", "sqlite+aiosqlite:///storefront.db"),
        request_timeout=float(_number("STOREFRONT_REQUEST_TIMEOUT", "10", float)),
        retry_times=int(_number("STOREFRONT_RETRY_TIMES", "1", int)),
        retry_delay=float(_number("STOREFRONT_RETRY_DELAY", "0.2", float)),
        confirmation_delay=float(_number("STOREFRONT_CONFIRMATION_DELAY", "2", float)),
        mock_gateway=_str_to_bool(os.getenv("STOREFRONT_MOCK_GATEWAY"), default=True),
        checkout_lease=_str_to_bool(os.getenv("STOREFRONT_CHECKOUT_LEASE")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_json=_str_to_bool(os.getenv("STOREFRONT_LOG_JSON")),
    )


__all__ = ("Settings", "load_settings")
