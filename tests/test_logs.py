"""Tests for logging setup."""

import logging
from unittest.mock import MagicMock

import pytest

from lens.logs import LOG_FORMAT, SkippedTickFilter, configure_logging


@pytest.fixture
def basic_config(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock = MagicMock()
    monkeypatch.setattr("lens.logs.logging.basicConfig", mock)
    aps = logging.getLogger("apscheduler")
    saved = aps.level
    yield mock
    aps.setLevel(saved)


def test_configure_logging_defaults(basic_config: MagicMock) -> None:
    configure_logging()
    basic_config.assert_called_once_with(format=LOG_FORMAT, level=logging.INFO)
    assert logging.getLogger("apscheduler").level == logging.WARNING


def test_configure_logging_explicit_level(basic_config: MagicMock) -> None:
    configure_logging("debug")
    basic_config.assert_called_once_with(format=LOG_FORMAT, level=logging.DEBUG)


def test_apscheduler_level_from_settings(
    basic_config: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("lens.config.settings.apscheduler_log_level", "ERROR")
    configure_logging()
    assert logging.getLogger("apscheduler").level == logging.ERROR


def test_skipped_tick_warning_filtered(basic_config: MagicMock) -> None:
    configure_logging()
    scheduler_logger = logging.getLogger("apscheduler.scheduler")
    try:
        skipped = scheduler_logger.makeRecord(
            "apscheduler.scheduler",
            logging.WARNING,
            __file__,
            0,
            'Execution of job "%s" skipped: maximum number of running instances reached (%d)',
            ("tick", 1),
            None,
        )
        other = scheduler_logger.makeRecord(
            "apscheduler.scheduler", logging.WARNING, __file__, 0, "Run time missed", (), None
        )
        assert scheduler_logger.filter(skipped) is False
        assert scheduler_logger.filter(other)
    finally:
        for f in list(scheduler_logger.filters):
            if isinstance(f, SkippedTickFilter):
                scheduler_logger.removeFilter(f)


def test_skipped_tick_filter_installed_once(basic_config: MagicMock) -> None:
    configure_logging()
    configure_logging()
    scheduler_logger = logging.getLogger("apscheduler.scheduler")
    try:
        assert sum(isinstance(f, SkippedTickFilter) for f in scheduler_logger.filters) == 1
    finally:
        for f in list(scheduler_logger.filters):
            if isinstance(f, SkippedTickFilter):
                scheduler_logger.removeFilter(f)
