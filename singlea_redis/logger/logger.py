"""Основной logger для структурированного логирования."""

import inspect
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from singlea_redis.logger.stream_writer import LogWriter, StreamWriter
from singlea_redis.logger.types import Category, Field, Level, LogEntry

_PACKAGE_DIR = "singlea_redis"


class Logger:
    """Logger для структурированного логирования с подключаемым writer."""

    def __init__(
        self,
        service_name: str,
        environment: str,
        writer: LogWriter | None = None,
        level: Level | str = Level.DEBUG,
    ) -> None:
        """
        Initialize Logger.

        Args:
            service_name: Имя сервиса
            environment: Окружение (dev, stage, prod)
            writer: Sink for entries, StreamWriter by default
            level: Minimum level; entries below it are dropped
        """
        self.service_name = service_name
        self.environment = environment
        self.writer: LogWriter = writer if writer is not None else StreamWriter()
        self.level = Level.parse(level)

        self._fields: dict[str, Any] = {}
        self._category: Category | None = None

    def trace(self, msg: str, *fields: Field) -> None:
        self._log(Level.TRACE, msg, None, *fields)

    def debug(self, msg: str, *fields: Field) -> None:
        """Log debug level message."""
        self._log(Level.DEBUG, msg, None, *fields)

    def info(self, msg: str, *fields: Field) -> None:
        """Log info level message."""
        self._log(Level.INFO, msg, None, *fields)

    def warn(self, msg: str, *fields: Field) -> None:
        """Log warn level message."""
        self._log(Level.WARN, msg, None, *fields)

    def error(self, msg: str, err: Exception | None = None, *fields: Field) -> None:
        """Log error level message."""
        self._log(Level.ERROR, msg, err, *fields)

    def is_enabled(self, level: Level) -> bool:
        return level.severity >= self.level.severity

    def _log(
        self,
        level: Level,
        msg: str,
        err: Exception | None,
        *fields: Field,
    ) -> None:
        """Основной метод логирования."""
        if not self.is_enabled(level):
            return

        # Caller: _log <- debug/info/... <- вызывающий код
        frame = inspect.currentframe()
        caller_frame = frame.f_back.f_back if frame and frame.f_back else None

        function_name = None
        file_path = None
        line_number = None

        if caller_frame:
            function_name = caller_frame.f_code.co_name
            file_path = self._clean_file_path(caller_frame.f_code.co_filename)
            line_number = caller_frame.f_lineno

        context: dict[str, Any] = dict(self._fields)
        category = self._category

        for field in fields:
            if field.key == "_category":
                if isinstance(field.value, Category):
                    category = field.value
                continue
            context[field.key] = field.value

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc),
            service_name=self.service_name,
            environment=self.environment,
            level=level,
            category=category,
            function_name=function_name,
            file_path=file_path,
            line_number=line_number,
            message=msg,
            context=context if context else None,
        )

        if err:
            entry.error_message = str(err)

        # Логирование не должно ломать вызывающий код
        try:
            self.writer.write(entry)
        except Exception as write_err:
            print(f"[LOGGER ERROR] Failed to write log: {write_err}", file=sys.stderr)

    def with_category(self, category: Category) -> "Logger":
        """Возвращает новый logger с указанной категорией."""
        new_logger = self._copy()
        new_logger._category = category
        return new_logger

    def with_fields(self, *fields: Field) -> "Logger":
        """Возвращает новый logger с дополнительными полями."""
        new_logger = self._copy()
        for field in fields:
            new_logger._fields[field.key] = field.value
        return new_logger

    def close(self) -> None:
        self.writer.close()

    def _copy(self) -> "Logger":
        new_logger = Logger(self.service_name, self.environment, self.writer, self.level)
        new_logger._fields = dict(self._fields)
        new_logger._category = self._category
        return new_logger

    @staticmethod
    def _clean_file_path(file_path: str) -> str:
        """Очищает путь к файлу от абсолютного пути."""
        path = Path(file_path)

        parts = path.parts
        if _PACKAGE_DIR in parts:
            idx = parts.index(_PACKAGE_DIR)
            return str(Path(*parts[idx:]))

        return path.name


# Глобальный logger instance
_global_logger: Logger | None = None


def get_logger() -> Logger:
    """Возвращает глобальный logger instance."""
    if _global_logger is None:
        raise RuntimeError("Logger not initialized. Call init_logger() first.")
    return _global_logger


def has_logger() -> bool:
    return _global_logger is not None


def init_logger(
    service_name: str,
    environment: str,
    writer: LogWriter | None = None,
    level: Level | str = Level.DEBUG,
) -> Logger:
    """
    Инициализирует глобальный logger.

    Args:
        service_name: Имя сервиса
        environment: Окружение (dev, stage, prod)
        writer: Sink for entries (StreamWriter, PostgresWriter)
        level: Minimum level

    Returns:
        Logger instance
    """
    global _global_logger
    _global_logger = Logger(service_name, environment, writer, level)
    return _global_logger


def reset_logger() -> None:
    """Drop the global logger (used on shutdown and in tests)."""
    global _global_logger
    _global_logger = None
