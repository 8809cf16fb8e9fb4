"""Central logging configuration for the editor core."""
from __future__ import annotations

import logging
import os
from typing import Optional

_DEFAULT_LEVEL = logging.INFO
LEVEL_ENV_VAR = "RICH_EDITOR_LOG_LEVEL"


def _configured_level() -> int:
    name = os.environ.get(LEVEL_ENV_VAR, "").strip().upper()
    level = logging.getLevelName(name) if name else _DEFAULT_LEVEL
    return level if isinstance(level, int) else _DEFAULT_LEVEL


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger with default configuration applied."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=_configured_level(), format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    return logger
