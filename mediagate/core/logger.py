"""
mediagate/core/logger.py

One stdout log stream for the gateway, the API client and the avatar flow.

Import-time side effect: the root logger gets a single handler unless one
is already installed. Modules then ask for a named logger:

    from mediagate.core.logger import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from mediagate.core.config import settings

_LEVEL = logging.DEBUG if settings.debug else logging.INFO

#: Libraries that log every HTTP exchange at INFO.
_CHATTY_LOGGERS = ("httpx", "urllib3", "uvicorn.access")


def _stdout_handler() -> logging.StreamHandler:
    """Handler writing ``time | level | logger | message`` lines to stdout."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(_LEVEL)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    return handler


def _install() -> None:
    root = logging.getLogger()
    if root.handlers:
        # pytest / uvicorn got here first.
        return

    root.setLevel(_LEVEL)
    root.addHandler(_stdout_handler())

    # Provider and refresh calls are logged by our own modules.
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_install()


def get_logger(name: str) -> logging.Logger:
    """Named logger under the shared root configuration."""
    return logging.getLogger(name)
