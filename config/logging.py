"""
Logging configuration for the E2E suite.
Colored console output via colorlog, module loggers under ``invoicedesk``.
"""

from __future__ import annotations

import logging.config
from typing import Any


def build_logging_config(level: str = "INFO") -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "unified": {
                "()": "colorlog.ColoredFormatter",
                "format": "{asctime} {log_color}{levelname:<8}{reset} {name:<36} {message}",
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "style": "{",
                "log_colors": {
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "unified",
            },
        },
        "root": {
            "handlers": ["console"],
            "level": level,
        },
        "loggers": {
            "invoicedesk": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
        },
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(build_logging_config(level.upper()))
