"""Package logger for Falcon HTTP.

Modules log through children of ``LOGGER``:

    from ..logger import LOGGER
    log = LOGGER.getChild("persistence")
"""

import logging
import sys

LOGGER = logging.getLogger("falcon_http")

_FORMAT = "%(asctime)s %(name)s [%(process)d] %(levelname)-5s %(message)s"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a stderr handler to LOGGER once and set its level."""
    LOGGER.setLevel(level)
    if not any(getattr(h, "_falcon", False) for h in LOGGER.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._falcon = True
        LOGGER.addHandler(handler)
    return LOGGER
