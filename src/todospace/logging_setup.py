from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


# PUBLIC_INTERFACE
def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging with a single stderr handler.

    Safe to call more than once (e.g. one app per test): existing handlers
    installed by this function are replaced rather than duplicated.
    """
    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        level_value = logging.INFO

    root = logging.getLogger()
    root.setLevel(level_value)

    for h in list(root.handlers):
        if getattr(h, "_todospace", False):
            root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
    handler._todospace = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # Third-party chatter stays at WARNING unless explicitly raised.
    for name in ("pymongo", "passlib", "httpx"):
        logging.getLogger(name).setLevel(logging.WARNING)
