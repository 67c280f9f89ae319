# coursehub/core/logging_config.py
import logging
import sys

from coursehub.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger (idempotent)."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())

    # aiosmtplib is chatty at DEBUG
    logging.getLogger("aiosmtplib").setLevel(logging.WARNING)
    _configured = True
