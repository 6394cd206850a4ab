"""Bootstrap Unit Tests."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from redis import Redis

from conftest import PayloadConfig
from singlea_redis.bootstrap import (
    build_feature_config_manager,
    create_log_writer,
    init_logging,
)
from singlea_redis.config.settings import Settings
from singlea_redis.logger.logger import get_logger
from singlea_redis.logger.postgres_writer import PostgresWriter
from singlea_redis.logger.stream_writer import StreamWriter
from singlea_redis.logger.types import Category
from singlea_redis.repository.feature_config_manager import RedisFeatureConfigManager


@pytest.fixture
def settings(monkeypatch, tmp_path) -> Settings:
    monkeypatch.delenv("LOG_DSN", raising=False)
    monkeypatch.setenv("FEATURE_CONFIG_KEY", "features:payload")
    monkeypatch.setenv("FEATURE_CONFIG_REQUIRED", "true")
    monkeypatch.setenv("LOG_LEVEL", "info")
    return Settings(secrets_dir=str(tmp_path))


class TestLogging:
    """Выбор writer'а и глобальный logger."""

    def test_stream_writer_without_dsn(self, settings: Settings) -> None:
        assert isinstance(create_log_writer(settings.logging), StreamWriter)

    def test_postgres_writer_with_dsn(self, settings: Settings) -> None:
        settings.logging.dsn = "dbname=logs"
        settings.logging.flush_interval = 1.5

        with patch("singlea_redis.logger.postgres_writer.psycopg2.connect") as connect:
            writer = create_log_writer(settings.logging)

        assert isinstance(writer, PostgresWriter)
        connect.assert_called_once_with("dbname=logs")
        assert writer.flush_interval == 1.5
        writer.close()

    def test_init_logging(self, settings: Settings, capsys) -> None:
        logger = init_logging(settings)

        assert get_logger() is logger
        assert logger.level.value == "info"
        assert "Logger initialized" in capsys.readouterr().out


class TestBuildFeatureConfigManager:
    """Сборка store из настроек."""

    def test_uses_settings(self, settings, hash_store, marshaller, encryptor) -> None:
        manager = build_feature_config_manager(settings, marshaller, encryptor, hash_store)

        assert isinstance(manager, RedisFeatureConfigManager)
        assert manager.key == "features:payload"
        assert manager.is_required() is True

        manager.persist("u42", PayloadConfig(algorithm="HS256"), "s3cr3t")
        assert "u42" in hash_store.hashes["features:payload"]

    def test_connects_when_no_client(self, settings, marshaller, encryptor) -> None:
        redis = MagicMock(spec=Redis)
        redis.hexists.return_value = 0

        with patch("singlea_redis.bootstrap.RedisClient") as client_cls:
            client_cls.return_value.connect.return_value = redis
            manager = build_feature_config_manager(settings, marshaller, encryptor)

        client_cls.assert_called_once_with(settings.redis)
        assert manager.exists("u1") is False
        redis.hexists.assert_called_once_with("features:payload", "u1")

    def test_uses_global_logger(self, settings, hash_store, marshaller, encryptor, list_writer) -> None:
        settings.logging.level = "debug"
        with patch("singlea_redis.bootstrap.create_log_writer", return_value=list_writer):
            init_logging(settings)

        manager = build_feature_config_manager(settings, marshaller, encryptor, hash_store)
        manager.remove("a", "b")

        entry = list_writer.entries[-1]
        assert entry.message == 'Key "features:payload": configs removed: a, b.'
        assert entry.category is Category.REDIS

    def test_without_global_logger(self, settings, hash_store, marshaller, encryptor) -> None:
        manager = build_feature_config_manager(settings, marshaller, encryptor, hash_store)

        assert manager.remove("a") == 0
