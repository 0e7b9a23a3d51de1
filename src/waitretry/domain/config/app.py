"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from waitretry.domain.config.backoff import BackoffConfig


class AppConfig(BaseModel):
    """Main application configuration.

    Root model of ``.waitretry.yml``. Validation is performed at load time to
    fail fast on configuration errors.

    Attributes:
        backoff: Backoff sequence configuration
    """

    backoff: BackoffConfig = Field(default_factory=BackoffConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "backoff": {
                    "policy": "decorrelated_jitter",
                    "min_delay_ms": 10,
                    "max_delay_ms": 1000,
                    "retry_count": 5,
                    "fast_first": False,
                    "seed": 42,
                },
            }
        },
    )
