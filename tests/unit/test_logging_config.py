"""ロギング設定のテスト"""

import logging
from typing import Iterator

import pytest

from coordinates_app.shared.logging import config as logging_config


@pytest.fixture
def fresh_root_logger(monkeypatch: pytest.MonkeyPatch) -> Iterator[logging.Logger]:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    for name in (logging_config.APP_LOGGER_NAME, *logging_config.QUIET_LIBRARIES):
        logger = logging.getLogger(name)
        monkeypatch.setattr(logger, "level", logger.level)
    monkeypatch.setattr(logging_config, "_logger_configured", False)

    yield root


def test_setup_logging_configures_once(fresh_root_logger: logging.Logger) -> None:
    logging_config.setup_logging(level="debug")

    assert fresh_root_logger.level == logging.DEBUG
    assert len(fresh_root_logger.handlers) == 1

    logging_config.setup_logging(level="ERROR")

    assert fresh_root_logger.level == logging.DEBUG
    assert len(fresh_root_logger.handlers) == 1


def test_unknown_level_falls_back_to_info(fresh_root_logger: logging.Logger) -> None:
    logging_config.setup_logging(level="verbose")

    assert fresh_root_logger.level == logging.INFO
    assert logging.getLogger("coordinates_app").level == logging.INFO


def test_debug_applies_to_app_namespace_only(fresh_root_logger: logging.Logger) -> None:
    """DEBUG指定でもHTTP・サーバー系ライブラリはWARNING以上のみ"""
    logging_config.setup_logging(level="DEBUG")

    assert logging.getLogger("coordinates_app").level == logging.DEBUG
    assert logging.getLogger("coordinates_app.features.app").getEffectiveLevel() == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("requests").level == logging.WARNING
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_stricter_level_also_applies_to_libraries(fresh_root_logger: logging.Logger) -> None:
    logging_config.setup_logging(level="ERROR")

    assert logging.getLogger("urllib3").level == logging.ERROR
    assert logging.getLogger("uvicorn.access").level == logging.ERROR


def test_log_records_include_thread_name(fresh_root_logger: logging.Logger) -> None:
    logging_config.setup_logging(level="INFO")

    formatter = fresh_root_logger.handlers[0].formatter
    assert formatter is not None
    record = logging.LogRecord("coordinates_app.test", logging.INFO, __file__, 1, "fix", None, None)
    record.threadName = "ip-geolocation-fetch"

    assert "[ip-geolocation-fetch] fix" in formatter.format(record)


def test_get_logger() -> None:
    assert logging_config.get_logger("coordinates_app.test").name == "coordinates_app.test"
