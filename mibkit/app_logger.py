from __future__ import annotations

import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from mibkit.app_config import AppConfig


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    log_dir: Path
    log_file: str = "mibkit.log"
    console: bool = True
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds color to log levels for console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname

        if record.levelname in self.COLORS:
            record.levelname = f"{self.COLORS[record.levelname]}{record.levelname}{self.RESET}"

        result = super().format(record)

        # Restore so the file handler sees the plain level name
        record.levelname = original_levelname

        return result


class AppLogger:
    _configured: bool = False
    _handlers: list[logging.Handler] = []

    @staticmethod
    def configure(app_config: "AppConfig") -> None:
        """
        Configure logging from an AppConfig instance.
        """
        logger_cfg = cast(dict[str, Any], app_config.get('logger', {}) or {})
        config = LoggingConfig(
            level=logger_cfg.get('level', 'INFO'),
            log_dir=Path(os.path.abspath(logger_cfg.get('log_dir', 'logs'))),
            log_file=logger_cfg.get('log_file', 'mibkit.log'),
            console=logger_cfg.get('console', True),
            max_bytes=logger_cfg.get('max_bytes', 10 * 1024 * 1024),
            backup_count=logger_cfg.get('backup_count', 5),
        )
        AppLogger(config)

    def __init__(self, config: LoggingConfig) -> None:
        if AppLogger._configured:
            return
        self._configure(config)
        AppLogger._configured = True

    @staticmethod
    def get(name: str | None = None) -> logging.Logger:
        return logging.getLogger(name)

    @staticmethod
    def _configure(config: LoggingConfig) -> None:
        level = logging.getLevelName(config.level.upper())
        if not isinstance(level, int):
            level = logging.INFO

        config.log_dir.mkdir(parents=True, exist_ok=True)
        log_path = config.log_dir / config.log_file

        root = logging.getLogger()
        root.setLevel(level)

        for handler in list(root.handlers):
            root.removeHandler(handler)

        fmt = (
            "%(asctime)s.%(msecs)03d "
            "%(levelname)s "
            "%(name)s "
            "[%(threadName)s] "
            "%(message)s"
        )
        formatter = logging.Formatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        AppLogger._handlers.append(file_handler)

        if config.console:
            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(ColoredFormatter(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S"))
            root.addHandler(console_handler)
            AppLogger._handlers.append(console_handler)

        AppLogger._suppress_third_party_loggers()

    @staticmethod
    def _suppress_third_party_loggers() -> None:
        # pysmi and pysnmp are chatty at DEBUG when readers probe directories
        logging.getLogger("pysmi").setLevel(logging.WARNING)
        logging.getLogger("pysnmp").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)

    @staticmethod
    def reset() -> None:
        """Drop handlers installed by configure() so it can run again."""
        root = logging.getLogger()
        for handler in AppLogger._handlers:
            root.removeHandler(handler)
            handler.close()
        AppLogger._handlers = []
        AppLogger._configured = False
