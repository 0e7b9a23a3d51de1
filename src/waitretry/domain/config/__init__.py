"""Configuration models with Pydantic validation."""

from waitretry.domain.config.app import AppConfig
from waitretry.domain.config.backoff import BackoffConfig

__all__ = [
    "AppConfig",
    "BackoffConfig",
]
