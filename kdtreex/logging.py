from __future__ import annotations

import logging

_ROOT_LOGGER_NAME = "kdtreex"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger namespaced under ``kdtreex``."""

    if not name:
        return logging.getLogger(_ROOT_LOGGER_NAME)
    if name.startswith(_ROOT_LOGGER_NAME + ".") or name == _ROOT_LOGGER_NAME:
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")


__all__ = ["get_logger"]
