from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_level: str = "INFO") -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stdout, level=level)
    logging.getLogger("app").setLevel(level)
    # httpx logs every request URL at INFO, including the appid query parameter.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
