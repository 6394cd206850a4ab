"""Test Configuration and Fixtures."""

from __future__ import annotations

import os
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Generator

import pytest

from singlea_redis.logger.logger import reset_logger
from singlea_redis.logger.types import LogEntry
from singlea_redis.marshaller.encryptor import FernetFeatureConfigEncryptor
from singlea_redis.marshaller.json_marshaller import JsonFeatureConfigMarshaller


# ============================================================
# Environment
# ============================================================


@pytest.fixture(autouse=True)
def _clean_env() -> Generator[None, None, None]:
    """Restore environment and drop the global logger after each test."""
    original = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original)
    reset_logger()


# ============================================================
# Domain Fixtures
# ============================================================


@dataclass
class PayloadConfig:
    """Sample feature config."""

    algorithm: str
    claims: list[str] = field(default_factory=list)
    ttl: int = 600


@dataclass
class TokenizerConfig:
    """Second sample feature config."""

    issuer: str
    audience: str | None = None


@pytest.fixture
def payload_config() -> PayloadConfig:
    return PayloadConfig(algorithm="HS256", claims=["email", "name"], ttl=300)


@pytest.fixture
def marshaller() -> JsonFeatureConfigMarshaller:
    return JsonFeatureConfigMarshaller(PayloadConfig, TokenizerConfig)


@pytest.fixture
def encryptor() -> FernetFeatureConfigEncryptor:
    # Мало итераций, чтобы тесты были быстрыми
    return FernetFeatureConfigEncryptor(iterations=1_000)


# ============================================================
# Test Doubles
# ============================================================


class InMemoryHashStore:
    """HashStore double counting calls per command."""

    def __init__(self) -> None:
        self.hashes: dict[str, dict[str, Any]] = {}
        self.calls: Counter[str] = Counter()

    def hexists(self, key: str, field: str) -> bool:
        self.calls["hexists"] += 1
        return field in self.hashes.get(key, {})

    def hget(self, key: str, field: str) -> Any:
        self.calls["hget"] += 1
        return self.hashes.get(key, {}).get(field)

    def hset(self, key: str, field: str, value: bytes) -> None:
        self.calls["hset"] += 1
        self.hashes.setdefault(key, {})[field] = value

    def hdel(self, key: str, *fields: str) -> int:
        self.calls["hdel"] += 1
        bucket = self.hashes.get(key, {})
        return sum(1 for f in fields if bucket.pop(f, None) is not None)


class RecordingLogger:
    """Minimal logger double recording debug lines."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def debug(self, msg: str, *fields: Any) -> None:
        self.messages.append(msg)


class ListWriter:
    """LogWriter collecting entries in memory."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []
        self.closed = False

    def write(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def hash_store() -> InMemoryHashStore:
    return InMemoryHashStore()


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def list_writer() -> ListWriter:
    return ListWriter()
