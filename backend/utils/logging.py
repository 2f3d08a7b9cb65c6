"""Logging utilities with single-line key=value output for the dashboard backend."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_NAMESPACE = "valor_m2"


def configure_logging(namespace: str = _NAMESPACE) -> logging.Logger:
    """Return the namespaced root logger, attaching a stream handler on first use.

    Records are printed as ``<time> <level> <logger> <event> key=value ...`` so
    they can be grepped locally and shipped to an aggregator unchanged.
    """

    logger = logging.getLogger(namespace)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(_LOG_LEVEL)
    logger.propagate = False
    return logger


def get_logger(child: Optional[str] = None) -> logging.Logger:
    base = configure_logging()
    return base.getChild(child) if child else base


def kv(**fields: Any) -> str:
    """Render ``fields`` as ``key=value`` pairs; values with spaces are quoted."""

    parts = []
    for key, value in fields.items():
        text = str(value)
        if not text or any(ch.isspace() for ch in text):
            text = f'"{text}"'
        parts.append(f"{key}={text}")
    return " ".join(parts)


__all__ = ["configure_logging", "get_logger", "kv"]
