"""
Structlog configuration for the University Search Portal API.

LOG_FORMAT selects the renderer: "json", "console", or "auto" (console on a
TTY, JSON otherwise). Every event carries the service name and APP_ENV.
Call configure() once at app startup.
"""
import logging
import os
import sys

import structlog

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FORMAT = os.environ.get("LOG_FORMAT", "auto").lower()
SERVICE_NAME = "uniportal"

# Loggers whose chatter is either redundant or heartbeat noise
QUIET_LOGGERS = {
    "pymongo": logging.WARNING,
    "uvicorn.access": logging.WARNING,  # RequestLoggingMiddleware covers requests
}


def add_service_context(logger, method_name, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("env", os.environ.get("APP_ENV", "production"))
    return event_dict


def _renderer(log_format: str):
    if log_format == "console" or (log_format == "auto" and sys.stderr.isatty()):
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def configure(log_level: str = LOG_LEVEL, log_format: str = LOG_FORMAT) -> None:
    """Configure structlog and route stdlib logging (pymongo, uvicorn) through it."""
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_context,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
