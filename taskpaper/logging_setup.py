from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _ServiceLogFilter(logging.Filter):
    """Keep taskpaper logs; let other libraries through at WARNING and up."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "taskpaper" or record.name.startswith("taskpaper."):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int = logging.INFO) -> logging.Handler:
    """Install a single stderr handler on the root logger.

    Calling it again replaces the handler instead of stacking a second one.
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, "_taskpaper_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.addFilter(_ServiceLogFilter())
    handler._taskpaper_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    logging.captureWarnings(True)
    return handler
