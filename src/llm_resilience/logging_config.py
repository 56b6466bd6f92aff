"""Structured logging setup for applications embedding the resilience layer.

The library itself only calls ``structlog.get_logger``; the host calls
``configure_logging`` once at startup to route those events through stdlib
logging. ``ENVIRONMENT=production`` renders JSON lines, anything else
renders colored console output.

Usage:
    from llm_resilience.logging_config import configure_logging

    configure_logging()  # reads LOG_LEVEL / ENVIRONMENT from settings
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from llm_resilience.config import Settings, settings as default_settings

# Loggers of transport libraries that adapters typically pull in
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def app_context(app_settings: Settings) -> Processor:
    """Build a processor stamping the application name and version on events."""
    app_name = app_settings.APP_NAME
    app_version = app_settings.APP_VERSION

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("app_version", app_version)
        return event_dict

    return add_app_context


def _renderer(environment: str) -> Processor:
    if environment.lower() == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def configure_logging(app_settings: Optional[Settings] = None) -> None:
    """Route structlog events through a single stdout handler.

    Args:
        app_settings: Settings providing LOG_LEVEL, ENVIRONMENT, APP_NAME and
            APP_VERSION (the module-level ``settings`` when None)
    """
    app_settings = app_settings or default_settings
    level = getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO)

    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context(app_settings),
    ]
    if app_settings.ENVIRONMENT.lower() == "production":
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(app_settings.ENVIRONMENT),
            foreign_pre_chain=pre_chain,
        )
    )
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=app_settings.LOG_LEVEL,
        environment=app_settings.ENVIRONMENT,
        app_version=app_settings.APP_VERSION,
    )
