"""Logging setup for processes that host recurring runners."""

import logging

from lens.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SkippedTickFilter(logging.Filter):
    """Drop APScheduler's per-skip WARNING; runners log skips at DEBUG instead."""

    def filter(self, record: logging.LogRecord) -> bool:
        return "maximum number of running instances reached" not in str(record.msg)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging and quiet APScheduler's per-tick chatter."""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=getattr(logging, (level or settings.log_level).upper()),
    )
    logging.getLogger("apscheduler").setLevel(
        getattr(logging, settings.apscheduler_log_level.upper())
    )
    scheduler_logger = logging.getLogger("apscheduler.scheduler")
    if not any(isinstance(f, SkippedTickFilter) for f in scheduler_logger.filters):
        scheduler_logger.addFilter(SkippedTickFilter())
