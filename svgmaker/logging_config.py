"""structlog configuration for applications that want library output.

The client only calls ``configure_logging`` when ``ClientConfig.logging``
is enabled; otherwise the host application's structlog setup applies.
"""

import logging

import structlog

__all__ = ["configure_logging"]

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(level: str = "info") -> None:
    """Configure structlog console output at ``level``.

    Also sets the level of the stdlib ``svgmaker`` logger used by the
    retry and rate limiting modules.
    """
    numeric_level = _LEVELS.get(level.lower(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
    logging.getLogger("svgmaker").setLevel(numeric_level)
