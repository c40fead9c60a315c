from __future__ import annotations

import logging

LOGGER_NAME = "metanature"
DEFAULT_FORMAT = "[%(name)s] %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger or one of its children (``metanature.<name>``)."""
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_metanature_logging(*, level: int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> None:
    """
    Attach a console handler to the ``metanature`` logger.

    Notes:
        - Opt-in only: library modules never call logging.basicConfig().
        - Nothing happens when the root logger or the package logger already has handlers.
    """
    root = logging.getLogger()
    package_logger = get_logger()

    if root.handlers or package_logger.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False


__all__ = ["LOGGER_NAME", "configure_metanature_logging", "get_logger"]
