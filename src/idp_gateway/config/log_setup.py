import logging
from typing import Optional


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> logging.Handler:
    """Install a single stream handler on the root logger."""
    global _handler

    root = logging.getLogger()
    root.setLevel(level)

    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in root.handlers:
        root.addHandler(_handler)

    # httpx logs every request URL at INFO, which includes user ids and emails
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return _handler
