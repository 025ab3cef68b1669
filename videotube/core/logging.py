# ============================================================================
# FILE: videotube/core/logging.py
# ============================================================================
import logging
import sys
from videotube.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False

def setup_logging(level: str = None) -> None:
    """Configure the root logger once for the whole application"""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.addHandler(handler)

    # SQL echo is noisy outside of debug sessions
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True
