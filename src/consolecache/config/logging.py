"""Logging setup for processes that embed the console cache."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx and httpcore log every request at INFO/DEBUG
_CHATTY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(
    *,
    level: int = logging.INFO,
    force: bool = False,
    quiet_http: bool = True,
) -> None:
    """Configure the root logger.

    With ``quiet_http`` the HTTP client libraries only report warnings, so
    cache and mutation logs stay readable. Pass ``force=True`` to replace
    handlers installed earlier.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    if quiet_http:
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(max(level, logging.WARNING))
