"""
Structured logger for the profile sync client.

Configures structlog so every component logs key/value events through the
standard library handlers. Bearer tokens and other credentials are masked
before rendering.

Example Usage:
    from profile_sync.utils.logger import get_logger

    logger = get_logger(component="profile_store")
    logger.info("Profile loaded", education_entries=2)
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import BindableLogger, EventDict, WrappedLogger


SENSITIVE_FIELDS = {"password", "token", "secret", "authorization", "auth"}


def mask_credentials(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Processor to mask sensitive credentials in log output.

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with masked credentials
    """
    for key in list(event_dict.keys()):
        key_lower = key.lower()
        for sensitive in SENSITIVE_FIELDS:
            if (
                key_lower == sensitive
                or key_lower.endswith(f"_{sensitive}")
                or key_lower.startswith(f"{sensitive}_")
            ):
                event_dict[key] = "***MASKED***"
                break

    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog on top of standard library logging.

    Args:
        log_level: Logging level name (default: "INFO")
        json_output: Render JSON lines instead of the console format
    """
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper(), logging.INFO),
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            mask_credentials,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: Optional[str] = None, **context) -> BindableLogger:
    """
    Get a structured logger with bound context.

    Args:
        component: Component name (e.g., "profile_api", "profile_store")
        **context: Extra key/value pairs bound to every event

    Returns:
        Logger with the component and context bound
    """
    logger = structlog.get_logger()

    if component:
        logger = logger.bind(component=component)
    if context:
        logger = logger.bind(**context)

    return logger
