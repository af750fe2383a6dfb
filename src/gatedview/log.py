import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    root = logging.getLogger("gatedview")
    if root.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel((level or os.getenv("GATEDVIEW_LOG_LEVEL") or "INFO").upper())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
