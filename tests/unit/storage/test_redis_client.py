"""RedisClient Unit Tests."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from singlea_redis.config.settings import RedisConfig
from singlea_redis.logger.logger import init_logger
from singlea_redis.storage.client import RedisClient


@pytest.fixture
def config(monkeypatch, tmp_path) -> RedisConfig:
    monkeypatch.setenv("REDIS_HOST", "redis.local")
    monkeypatch.setenv("REDIS_PORT", "6379")
    monkeypatch.setenv("REDIS_CONNECT_RETRIES", "3")
    monkeypatch.delenv("REDIS_CLUSTER", raising=False)
    return RedisConfig(secrets_dir=str(tmp_path))


class TestRedisClient:
    """Подключение к Redis."""

    def test_get_redis_before_connect(self, config: RedisConfig) -> None:
        with pytest.raises(RuntimeError, match="not connected"):
            RedisClient(config).get_redis()

    def test_connect(self, config: RedisConfig) -> None:
        with patch("singlea_redis.storage.client.Redis") as redis_cls:
            client = RedisClient(config)
            redis = client.connect()

        assert redis is redis_cls.return_value
        assert client.get_redis() is redis
        redis.ping.assert_called_once_with()
        assert redis_cls.call_args.kwargs["host"] == "redis.local"

    def test_connect_cluster(self, config: RedisConfig) -> None:
        config.cluster = True

        with patch("singlea_redis.storage.client.RedisCluster") as cluster_cls:
            redis = RedisClient(config).connect()

        assert redis is cluster_cls.return_value
        assert "db" not in cluster_cls.call_args.kwargs

    def test_connect_retries_then_succeeds(self, config: RedisConfig, list_writer) -> None:
        init_logger("test", "test", list_writer)
        failing = MagicMock()
        failing.ping.side_effect = RedisConnectionError("refused")
        healthy = MagicMock()

        with patch("singlea_redis.storage.client.Redis", side_effect=[failing, healthy]), patch(
            "singlea_redis.storage.client.time.sleep"
        ) as sleep:
            redis = RedisClient(config).connect(initial_delay=0.1)

        assert redis is healthy
        sleep.assert_called_once_with(0.1)
        failing.close.assert_called_once_with()
        healthy.close.assert_not_called()
        assert [e.message for e in list_writer.entries] == [
            "Redis connection attempt 1/3 failed, retrying..."
        ]

    def test_connect_gives_up(self, config: RedisConfig) -> None:
        failing = MagicMock()
        failing.ping.side_effect = RedisConnectionError("refused")

        with patch("singlea_redis.storage.client.Redis", return_value=failing), patch(
            "singlea_redis.storage.client.time.sleep"
        ) as sleep:
            with pytest.raises(ConnectionError, match="redis.local:6379 after 3 attempts"):
                RedisClient(config).connect()

        assert sleep.call_count == 2
        assert failing.close.call_count == 3

    def test_failed_close_does_not_mask_retry(self, config: RedisConfig) -> None:
        failing = MagicMock()
        failing.ping.side_effect = RedisConnectionError("refused")
        failing.close.side_effect = RedisConnectionError("already closed")
        healthy = MagicMock()

        with patch("singlea_redis.storage.client.Redis", side_effect=[failing, healthy]), patch(
            "singlea_redis.storage.client.time.sleep"
        ):
            assert RedisClient(config).connect() is healthy

    def test_close(self, config: RedisConfig) -> None:
        with patch("singlea_redis.storage.client.Redis") as redis_cls:
            client = RedisClient(config)
            client.connect()
            client.close()

        redis_cls.return_value.close.assert_called_once_with()
        with pytest.raises(RuntimeError):
            client.get_redis()
