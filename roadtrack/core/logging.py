"""JSON logging for the API process and the CLI scripts."""
from __future__ import annotations

import logging
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that drown out application events at INFO.
_NOISY_LOGGERS = ("sqlalchemy.engine", "alembic.runtime.migration", "uvicorn.access")


def setup_logging(level: str = "INFO", *, service: str = "roadtrack") -> None:
    """Route every record through one JSON handler on the root logger."""

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level.upper())

    handler = logging.StreamHandler()
    handler.setFormatter(
        jsonlogger.JsonFormatter(
            LOG_FORMAT,
            rename_fields={"levelname": "level", "asctime": "ts"},
            static_fields={"service": service},
        )
    )
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level.upper())
    return logger


__all__ = ["LOG_FORMAT", "setup_logging", "get_logger"]
