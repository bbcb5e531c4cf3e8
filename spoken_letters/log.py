"""Logging configuration helpers."""
from __future__ import annotations

import logging
from typing import Optional

ROOT_LOGGER_NAME = "spoken_letters"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the package root, configuring the root once."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return logging.getLogger(name or ROOT_LOGGER_NAME)
