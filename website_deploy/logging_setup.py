from __future__ import annotations

import logging

LOG_FORMAT = "%(levelname)s: %(message)s"


def ensure_logging() -> None:
    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    else:
        root.setLevel(logging.INFO)
        for handler in root.handlers:
            handler.setFormatter(formatter)
