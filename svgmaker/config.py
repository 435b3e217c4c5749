"""Client configuration.

Holds the settings consumed by the request pipeline (base URL, timeout,
retry policy, rate limit) plus the logging switches.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Any

from svgmaker.errors import SVGMakerError

DEFAULT_BASE_URL = "https://api.svgmaker.io"
DEFAULT_RETRY_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

_LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for an ``SVGMakerClient``.

    Instances are immutable. Use ``merged()`` to derive a modified copy;
    operations already in flight keep the instance they started with.

    Attributes:
        api_key: API key sent in the ``x-api-key`` header.
        base_url: Service root that every request path is joined to.
        timeout: Per-attempt request timeout in seconds.
        max_retries: Additional attempts after the first one.
        retry_backoff_factor: Backoff scale in milliseconds. Retry delays
            grow as ``2**attempt * retry_backoff_factor`` with a 1s floor.
        retry_status_codes: HTTP statuses that are safe to retry.
        rate_limit: Maximum operations per 60 second window (0 = unlimited).
        logging: Configure structlog output when the client is created.
        log_level: Minimum level emitted when ``logging`` is enabled.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    max_retries: int = 3
    retry_backoff_factor: float = 300
    retry_status_codes: frozenset[int] = field(
        default_factory=lambda: DEFAULT_RETRY_STATUS_CODES
    )
    rate_limit: int = 60
    logging: bool = False
    log_level: str = "info"

    def __post_init__(self) -> None:
        # Accept any iterable of ints for convenience; store as frozenset.
        if not isinstance(self.retry_status_codes, frozenset):
            object.__setattr__(
                self, "retry_status_codes", frozenset(self.retry_status_codes)
            )
        if self.timeout <= 0:
            raise SVGMakerError.validation("timeout must be positive")
        if self.max_retries < 0:
            raise SVGMakerError.validation("max_retries must be >= 0")
        if self.rate_limit < 0:
            raise SVGMakerError.validation("rate_limit must be >= 0")
        if self.log_level not in _LOG_LEVELS:
            raise SVGMakerError.validation(
                f"log_level must be one of {', '.join(_LOG_LEVELS)}"
            )

    def merged(self, **overrides: Any) -> "ClientConfig":
        """Return a copy with ``overrides`` applied.

        Raises:
            SVGMakerError: VALIDATION if an override names an unknown field
                or produces an invalid configuration.
        """
        known = {f.name for f in dataclasses.fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise SVGMakerError.validation(
                f"Unknown configuration option(s): {', '.join(unknown)}"
            )
        return dataclasses.replace(self, **overrides)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Load configuration from ``SVGMAKER_*`` environment variables.

        Args:
            **overrides: Explicit values that take precedence over the
                environment.

        Returns:
            ClientConfig instance with values from environment.
        """
        values: dict[str, Any] = {
            "api_key": os.getenv("SVGMAKER_API_KEY", ""),
            "base_url": os.getenv("SVGMAKER_BASE_URL", DEFAULT_BASE_URL),
            "timeout": float(os.getenv("SVGMAKER_TIMEOUT", "30")),
            "max_retries": int(os.getenv("SVGMAKER_MAX_RETRIES", "3")),
            "rate_limit": int(os.getenv("SVGMAKER_RATE_LIMIT", "60")),
            "log_level": os.getenv("SVGMAKER_LOG_LEVEL", "info").lower(),
        }
        values.update(overrides)
        return cls(**values)
