"""Tests for AppLogger configuration."""

import logging
from pathlib import Path

from pytest_mock import MockerFixture

from mibkit.app_logger import AppLogger, ColoredFormatter, LoggingConfig


def make_config(mocker: MockerFixture, settings: dict) -> object:
    app_config = mocker.Mock()
    app_config.get.return_value = settings
    return app_config


def test_configure_installs_file_and_console_handlers(tmp_path: Path, mocker: MockerFixture) -> None:
    AppLogger.configure(make_config(mocker, {"level": "DEBUG", "log_dir": str(tmp_path), "log_file": "t.log"}))
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    kinds = {type(h).__name__ for h in AppLogger._handlers}
    assert kinds == {"RotatingFileHandler", "StreamHandler"}
    AppLogger.get("mibkit.test").debug("hello file")
    for handler in AppLogger._handlers:
        handler.flush()
    assert "hello file" in (tmp_path / "t.log").read_text()


def test_configure_only_once(tmp_path: Path, mocker: MockerFixture) -> None:
    AppLogger.configure(make_config(mocker, {"log_dir": str(tmp_path)}))
    AppLogger.configure(make_config(mocker, {"log_dir": str(tmp_path / "other")}))
    assert not (tmp_path / "other").exists()
    assert len(AppLogger._handlers) == 2


def test_console_can_be_disabled(tmp_path: Path, mocker: MockerFixture) -> None:
    AppLogger.configure(make_config(mocker, {"log_dir": str(tmp_path), "console": False}))
    assert [type(h).__name__ for h in AppLogger._handlers] == ["RotatingFileHandler"]


def test_unknown_level_falls_back_to_info(tmp_path: Path) -> None:
    AppLogger(LoggingConfig(level="chatty", log_dir=tmp_path, console=False))
    assert logging.getLogger().level == logging.INFO


def test_third_party_loggers_quietened(tmp_path: Path) -> None:
    AppLogger(LoggingConfig(level="DEBUG", log_dir=tmp_path, console=False))
    assert logging.getLogger("pysmi").level == logging.WARNING
    assert logging.getLogger("pysnmp").level == logging.WARNING


def test_reset_removes_handlers(tmp_path: Path) -> None:
    AppLogger(LoggingConfig(level="INFO", log_dir=tmp_path, console=False))
    handler = AppLogger._handlers[0]
    AppLogger.reset()
    assert handler not in logging.getLogger().handlers
    assert AppLogger._configured is False


def test_colored_formatter_restores_levelname() -> None:
    formatter = ColoredFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("x", logging.ERROR, __file__, 1, "boom", None, None)
    assert formatter.format(record) == "\033[31mERROR\033[0m boom"
    assert record.levelname == "ERROR"
