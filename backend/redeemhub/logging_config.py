import logging
import sys

from redeemhub.config import settings


def configure_logging(level: str = None) -> logging.Logger:
    """Attach a single stdout handler to the package logger (idempotent)."""
    log = logging.getLogger("redeemhub")
    log.setLevel((level or settings.LOG_LEVEL).upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(
            logging.Formatter("[redeemhub] %(levelname)s %(name)s: %(message)s")
        )
        log.addHandler(h)
    return log
