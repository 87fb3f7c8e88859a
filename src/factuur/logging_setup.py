from __future__ import annotations

import logging.config
import os
import sys


def setup_logging(level: str | None = None) -> None:
    level = (level or os.getenv("FACTUUR_LOG_LEVEL", "INFO")).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "simple": {"format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "simple",
                    "stream": sys.stdout,
                },
            },
            "loggers": {
                "factuur": {"handlers": ["console"], "level": level, "propagate": False},
            },
        }
    )
