"""Logging setup driven by application settings.

The ``simple`` format is a plain stdlib format string. The ``json`` format
renders each record through structlog so that quotes, newlines and
tracebacks come out as valid JSON.
"""

import logging.config

import structlog

from app.core.config import LogFormatEnum, Settings

SIMPLE_FORMAT = "[%(asctime)s] %(levelname)s: %(name)s: %(message)s"


def _json_formatter() -> dict:
    return {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": [
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="ISO"),
        ],
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    }


def build_logging_config(settings: Settings) -> dict:
    """Return a ``dictConfig`` mapping for the given settings."""
    level = settings.log_level.value
    if settings.log_format == LogFormatEnum.json:
        formatter = _json_formatter()
    else:
        formatter = {"format": SIMPLE_FORMAT}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": formatter,
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
            },
        },
        "loggers": {
            "": {"handlers": ["console"], "level": level, "propagate": False},
            # SQL echo is controlled by settings.debug on the engine
            "sqlalchemy.engine": {"level": "WARNING"},
        },
    }


def configure_logging(settings: Settings) -> None:
    logging.config.dictConfig(build_logging_config(settings))
