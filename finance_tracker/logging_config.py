from __future__ import annotations

import logging
from logging.config import dictConfig

from .config import LOG_LEVEL


def configure_logging(level: int | str = LOG_LEVEL) -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "level": level,
                }
            },
            "loggers": {
                "": {"handlers": ["console"], "level": level},
                "streamlit": {"handlers": ["console"], "level": logging.WARNING},
            },
        }
    )
