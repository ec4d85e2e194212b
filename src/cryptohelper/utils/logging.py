"""Logger hierarchy rooted at ``cryptohelper``.

Module loggers (``get_logger(__name__)``) propagate to the package logger,
which owns the single stdout handler.
"""
import logging
import os
import sys

ROOT_LOGGER = "cryptohelper"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        root.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
        root.propagate = False
    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    root = _configure_root()
    if name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
