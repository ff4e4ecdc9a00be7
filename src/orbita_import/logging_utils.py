from __future__ import annotations

import logging
import os
from typing import Optional

from .config_loader import ImportConfig

LOG_LEVEL_ENV = "ORBITA_IMPORT_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"


def resolve_level(level_name: Optional[str]) -> int:
    """Map ``"debug"``, ``"20"`` etc. to a numeric level; unknown names mean INFO."""
    normalized = (level_name or "INFO").strip().upper()
    if normalized.isdigit():
        return int(normalized)
    level = logging.getLevelName(normalized)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(config: ImportConfig, level_override: Optional[str] = None) -> int:
    """
    Set the root logger level for an ``orbita-import`` run and return it.

    An ``ORBITA_IMPORT_LOG_LEVEL`` set in the environment beats ``--log-level``
    (passed here as ``level_override``), which beats ``logging.level`` in the
    YAML file. With none of them set, only row warnings and failures are
    shown. Per-row debug output (ignored headers, photo matches, calling-code
    hits) needs ``DEBUG``.
    """
    level_name = (
        os.getenv(LOG_LEVEL_ENV) or level_override or config.logging.level or DEFAULT_LEVEL
    )
    level_value = resolve_level(level_name)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level_value)
    else:
        logging.basicConfig(level=level_value, format="%(levelname)s %(name)s: %(message)s")
    return level_value
