# mediatags/common/logging.py
from __future__ import annotations

import logging
from typing import Optional


def get_logger(name: str = "mediatags", level: Optional[int | str] = None) -> logging.Logger:
    """
    Return a named logger. If nothing has configured the root logger yet
    (no uvicorn, no test harness), add a basicConfig once.
    Passing `level` sets it on this logger only.
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if level is not None:
        logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
