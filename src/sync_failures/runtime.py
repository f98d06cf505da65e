from __future__ import annotations

import logging

from sync_failures.config import Settings, get_settings
from sync_failures.logging_utils import configure_logging
from sync_failures.origin_table import get_origin_table


logger = logging.getLogger(__name__)


def bootstrap() -> Settings:
    """Configure logging and load the origin table named by ORIGIN_TABLE_PATH.

    A malformed origin table raises ValueError here.
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    table = get_origin_table()
    logger.info("Failure classification ready with %d workflow/activity origins", len(table))
    return settings
