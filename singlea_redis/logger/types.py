"""Types and constants for structured logging."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Level(str, Enum):
    """Log level определяет уровень важности лога."""

    TRACE = "trace"
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def severity(self) -> int:
        """Числовой вес уровня для фильтрации."""
        return _SEVERITY[self]

    @classmethod
    def parse(cls, value: "str | Level") -> "Level":
        """Parse level name, accepting ``warning`` as an alias of ``warn``."""
        if isinstance(value, Level):
            return value
        name = value.strip().lower()
        if name == "warning":
            name = "warn"
        return cls(name)


_SEVERITY = {
    Level.TRACE: 0,
    Level.DEBUG: 10,
    Level.INFO: 20,
    Level.WARN: 30,
    Level.ERROR: 40,
}


class Category(str, Enum):
    """Category определяет категорию события для группировки логов."""

    REDIS = "redis"  # Операции с hash-ключом конфигов
    SECURITY = "security"  # Шифрование / расшифровка
    DATABASE = "database"  # Запись логов в PostgreSQL
    CONFIG = "config"  # Загрузка настроек


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LogEntry:
    """LogEntry представляет одну запись лога."""

    timestamp: datetime
    service_name: str
    environment: str
    level: Level
    message: str
    ingestion_time: datetime = field(default_factory=_utcnow)
    category: Category | None = None
    function_name: str | None = None
    file_path: str | None = None
    line_number: int | None = None
    error_message: str | None = None
    context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize entry for JSON output."""
        data: dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.value,
            "category": self.category.value if self.category else None,
            "message": self.message,
            "service_name": self.service_name,
            "environment": self.environment,
        }
        if self.function_name:
            data["caller"] = f"{self.file_path}:{self.line_number} {self.function_name}"
        if self.error_message:
            data["error"] = self.error_message
        if self.context:
            data["context"] = self.context
        return data


@dataclass
class Field:
    """Field для структурированных данных в логах."""

    key: str
    value: Any


def category(cat: Category) -> Field:
    """Создаёт поле для категории лога."""
    return Field(key="_category", value=cat)


def param(key: str, value: Any) -> Field:
    """Универсальная функция для добавления параметра."""
    return Field(key=key, value=value)


def error(err: Exception) -> Field:
    """Создаёт поле для ошибки."""
    return Field(key="error", value=str(err))
