"""Redis hash capability and adapters for concrete clients."""

import inspect
from typing import Any, Protocol, runtime_checkable

from redis import Redis
from redis.asyncio import Redis as AsyncRedis
from redis.asyncio.cluster import RedisCluster as AsyncRedisCluster
from redis.cluster import RedisCluster


@runtime_checkable
class HashStore(Protocol):
    """Hash commands needed by the feature config store."""

    def hexists(self, key: str, field: str) -> bool: ...

    def hget(self, key: str, field: str) -> bytes | str | None: ...

    def hset(self, key: str, field: str, value: bytes) -> None: ...

    def hdel(self, key: str, *fields: str) -> int: ...


class RedisHashStore:
    """
    Adapter for redis-py ``Redis`` and ``RedisCluster``.

    HDEL там возвращает int; всё остальное (pipeline, bool) считаем нулём.
    """

    def __init__(self, redis: Redis | RedisCluster) -> None:
        self.redis = redis

    def hexists(self, key: str, field: str) -> bool:
        return bool(self.redis.hexists(key, field))

    def hget(self, key: str, field: str) -> bytes | str | None:
        return self.redis.hget(key, field)  # type: ignore[return-value]

    def hset(self, key: str, field: str, value: bytes) -> None:
        self.redis.hset(key, field, value)

    def hdel(self, key: str, *fields: str) -> int:
        return removed_count(self.redis.hdel(key, *fields))


class CommandHashStore:
    """
    Adapter for clients that only expose ``execute_command``.

    Raw RESP replies may come back as ``b"2"``; HDEL reply is cast with int().
    """

    def __init__(self, client: Any) -> None:
        self.client = client

    def hexists(self, key: str, field: str) -> bool:
        return _to_int(self.client.execute_command("HEXISTS", key, field)) > 0

    def hget(self, key: str, field: str) -> bytes | str | None:
        return self.client.execute_command("HGET", key, field)  # type: ignore[no-any-return]

    def hset(self, key: str, field: str, value: bytes) -> None:
        self.client.execute_command("HSET", key, field, value)

    def hdel(self, key: str, *fields: str) -> int:
        return _to_int(self.client.execute_command("HDEL", key, *fields))


def removed_count(reply: Any) -> int:
    """HDEL reply as a non-negative int; anything but a plain int is 0."""
    if isinstance(reply, bool) or not isinstance(reply, int):
        return 0
    return max(reply, 0)


def _to_int(reply: Any) -> int:
    if isinstance(reply, bool):
        return int(reply)
    try:
        value = int(reply)
    except (TypeError, ValueError):
        return 0
    return max(value, 0)


def wrap_redis(client: Any) -> HashStore:
    """
    Return a HashStore for a supported client.

    Args:
        client: HashStore adapter, redis-py Redis/RedisCluster, or any object
            with ``execute_command``

    Raises:
        TypeError: If the client shape is not supported or the client is async
    """
    if isinstance(client, (RedisHashStore, CommandHashStore)):
        return client
    # У async-клиента команды возвращают coroutine
    if isinstance(client, (AsyncRedis, AsyncRedisCluster)) or inspect.iscoroutinefunction(
        getattr(client, "execute_command", None)
    ):
        raise TypeError(f"Async Redis clients are not supported: {type(client).__name__}")
    if isinstance(client, (Redis, RedisCluster)):
        return RedisHashStore(client)
    if callable(getattr(client, "execute_command", None)):
        return CommandHashStore(client)
    if isinstance(client, HashStore):
        return client
    raise TypeError(f"Unsupported Redis client: {type(client).__name__}")
