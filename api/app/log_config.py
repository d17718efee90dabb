# api/app/log_config.py
from __future__ import annotations

import logging

from services.correlation import CorrelationIdFilter

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s cid=%(correlation_id)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )
