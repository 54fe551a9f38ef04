"""Logging utilities.

Key goal:
- Each handler step logs clearly so a failed invocation can be located in the
  function logs quickly.
- Keep logging config minimal; the hosting runtime may already own the root logger.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_LEVEL = os.environ.get("SKILLBRIDGE_LOG_LEVEL", "INFO").upper()

def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # If already configured elsewhere, do not attach handlers again.
    if logger.handlers:
        return logger

    logger.setLevel(_DEFAULT_LEVEL)

    h = logging.StreamHandler()
    fmt = logging.Formatter("[%(levelname)s] %(name)s:%(lineno)d - %(message)s")
    h.setFormatter(fmt)
    logger.addHandler(h)

    return logger

def log_step(logger: logging.Logger, step: str, msg: str, *args, request_id: Optional[str] = None):
    # Alexa requestId ties the steps of one invocation together in shared log streams
    if request_id:
        logger.info("[STEP %s] [%s] " + msg, step, request_id, *args)
    else:
        logger.info("[STEP %s] " + msg, step, *args)
