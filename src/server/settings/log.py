import logging

from src.server.settings.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "") -> logging.Logger:
    """
    Sätter upp "lagerkoll"-loggern en gång (idempotent vid omstart/reload).
    Alla moduler loggar via logging.getLogger("lagerkoll.<område>").
    """
    root = logging.getLogger("lagerkoll")
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(h)
    root.setLevel((level or settings.log_level or "INFO").upper())
    return root
