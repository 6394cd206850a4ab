"""Redis client for the feature config store."""

import contextlib
import time
from typing import TYPE_CHECKING

from redis import Redis
from redis.cluster import RedisCluster
from redis.exceptions import RedisClusterException, RedisError

from singlea_redis.logger.logger import get_logger, has_logger
from singlea_redis.logger.types import Category, param

if TYPE_CHECKING:
    from singlea_redis.config.settings import RedisConfig


class RedisClient:
    """Redis client holding a single connection (or cluster) handle."""

    def __init__(self, config: "RedisConfig") -> None:
        """
        Initialize Redis client.

        Args:
            config: Redis configuration with host, port, db
        """
        self.config = config
        self.redis: Redis | RedisCluster | None = None

    def _create(self) -> Redis | RedisCluster:
        if self.config.cluster:
            return RedisCluster(
                host=self.config.host,
                port=self.config.port,
                password=self.config.password,
                socket_connect_timeout=self.config.socket_timeout,
                socket_timeout=self.config.socket_timeout,
            )
        return Redis(
            host=self.config.host,
            port=self.config.port,
            db=self.config.db,
            password=self.config.password,
            socket_keepalive=True,
            socket_connect_timeout=self.config.socket_timeout,
            socket_timeout=self.config.socket_timeout,
        )

    def connect(self, initial_delay: float = 0.5) -> Redis | RedisCluster:
        """
        Connect to Redis, retrying the initial PING with exponential backoff.

        Args:
            initial_delay: Initial delay between attempts in seconds

        Returns:
            Connected redis-py client

        Raises:
            ConnectionError: If unable to connect after connect_retries attempts
        """
        max_retries = max(self.config.connect_retries, 1)
        delay = initial_delay
        last_error: Exception | None = None

        for attempt in range(1, max_retries + 1):
            client: Redis | RedisCluster | None = None
            try:
                client = self._create()
                client.ping()
                self.redis = client
                return client
            except (RedisError, RedisClusterException) as e:
                last_error = e
                # Пул неудачной попытки освобождаем до следующей
                if client is not None:
                    with contextlib.suppress(RedisError, RedisClusterException):
                        client.close()
                if attempt < max_retries:
                    if has_logger():
                        get_logger().with_category(Category.REDIS).warn(
                            f"Redis connection attempt {attempt}/{max_retries} failed, retrying...",
                            param("host", self.config.host),
                            param("port", self.config.port),
                            param("delay", delay),
                            param("error", str(e)),
                        )
                    time.sleep(delay)
                    delay = min(delay * 2, 30.0)

        if has_logger():
            get_logger().with_category(Category.REDIS).error(
                f"Failed to connect to Redis after {max_retries} attempts",
                last_error,
                param("host", self.config.host),
                param("port", self.config.port),
            )
        raise ConnectionError(
            f"Failed to connect to Redis at {self.config.host}:{self.config.port} "
            f"after {max_retries} attempts"
        ) from last_error

    def close(self) -> None:
        """Close Redis connection."""
        if self.redis is not None:
            self.redis.close()
            self.redis = None

    def get_redis(self) -> Redis | RedisCluster:
        """
        Get Redis client instance.

        Raises:
            RuntimeError: If not connected
        """
        if self.redis is None:
            raise RuntimeError("RedisClient not connected. Call connect() first.")
        return self.redis
