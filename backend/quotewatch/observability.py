from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger("quotewatch")
    root.setLevel(level.upper())
    if not any(getattr(handler, "_quotewatch", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._quotewatch = True  # type: ignore[attr-defined]
        root.addHandler(handler)
