from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from textual.logging import TextualHandler

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """
    Call once at app start. The terminal belongs to the UI, so records go to
    the Textual devtools console and, optionally, a rotating log file.
    """
    root = logging.getLogger()
    if root.handlers:
        # already configured (avoid duplicates)
        root.setLevel(level)
        return

    root.setLevel(level)
    fmt = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")

    console = TextualHandler()
    console.setFormatter(fmt)
    root.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    # urllib3 is chatty at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
