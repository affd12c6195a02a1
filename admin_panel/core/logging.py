"""
Logging setup - one handler, one format for every module logger.
Modules log via logging.getLogger(__name__); the app factory calls configure_logging once.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the root logger (idempotent across app reloads)."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(h, "_admin_panel", False) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._admin_panel = True  # type: ignore[attr-defined]
    root.addHandler(handler)
