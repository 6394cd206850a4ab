"""Feature config persistence in a single Redis hash."""

from typing import Any

from singlea_redis.domain.contracts import (
    FeatureConfig,
    FeatureConfigEncryptor,
    FeatureConfigManager,
    FeatureConfigMarshaller,
    SupportsDebug,
)
from singlea_redis.logger.logger import Logger
from singlea_redis.logger.types import param
from singlea_redis.storage.hash_store import HashStore, removed_count, wrap_redis


class RedisFeatureConfigManager:
    """
    Stores encrypted feature configs as fields of one Redis hash.

    Each operation is a single hash command (HEXISTS, HSET, HGET, HDEL);
    marshalling and encryption are delegated to the injected collaborators.
    """

    def __init__(
        self,
        key: str,
        redis: HashStore,
        marshaller: FeatureConfigMarshaller,
        encryptor: FeatureConfigEncryptor,
        required: bool,
        logger: SupportsDebug | None = None,
    ) -> None:
        """
        Initialize RedisFeatureConfigManager.

        Args:
            key: Redis hash name
            redis: Hash capability over the Redis client
            marshaller: Feature config marshaller
            encryptor: Encryptor for marshalled configs
            required: Whether the feature is required for every client
            logger: Optional logger for debug lines
        """
        self._key = key
        self._redis = redis
        self._marshaller = marshaller
        self._encryptor = encryptor
        self._required = required
        self._logger = logger

    @property
    def key(self) -> str:
        return self._key

    def supports(self, config: FeatureConfig | type | str) -> bool:
        return self._marshaller.supports(config)

    def is_required(self) -> bool:
        return self._required

    def exists(self, id: str) -> bool:
        return bool(self._redis.hexists(self._key, id))

    def persist(self, id: str, config: FeatureConfig, secret: str) -> None:
        """
        Marshall, encrypt and store config under ``id``.

        Debug line is written after the HSET attempt even if it fails.
        """
        value = self._marshaller.marshall(config)
        value = self._encryptor.encrypt(value, secret)

        try:
            self._redis.hset(self._key, id, value)
        finally:
            self._debug(
                f'Key "{self._key}": config {id} persisted.',
                param("key", self._key),
                param("id", id),
            )

    def find(self, id: str, secret: str) -> FeatureConfig | None:
        """
        Load config stored under ``id``.

        Returns:
            Config or None if the field does not exist

        Raises:
            DecryptionError, MarshallingError: Field exists but is unreadable
        """
        value = self._redis.hget(self._key, id)
        if value is None:
            return None

        return self._marshaller.unmarshall(self._encryptor.decrypt(value, secret))

    def remove(self, *ids: str) -> int:
        """
        Delete configs by ids.

        Returns:
            Number of fields actually removed
        """
        if not ids:
            return 0

        try:
            # Конструктор принимает и необёрнутые handle
            return removed_count(self._redis.hdel(self._key, *ids))
        finally:
            self._debug(
                f'Key "{self._key}": configs removed: {", ".join(ids)}.',
                param("key", self._key),
                param("ids", list(ids)),
            )

    def _debug(self, msg: str, *fields: Any) -> None:
        if self._logger is None:
            return
        # Field-аргументы только для нашего Logger
        if isinstance(self._logger, Logger):
            self._logger.debug(msg, *fields)
        else:
            self._logger.debug(msg)


def create_feature_config_manager(
    key: str,
    redis: Any,
    marshaller: FeatureConfigMarshaller,
    encryptor: FeatureConfigEncryptor,
    required: bool,
    logger: SupportsDebug | None = None,
) -> FeatureConfigManager:
    """
    Create a feature config manager over a Redis hash.

    Args:
        key: Redis hash name
        redis: HashStore, redis-py Redis/RedisCluster or a raw command client
        marshaller: Feature config marshaller
        encryptor: Encryptor for marshalled configs
        required: Whether the feature is required
        logger: Optional logger

    Raises:
        TypeError: If the Redis client is not supported
    """
    return RedisFeatureConfigManager(
        key,
        wrap_redis(redis),
        marshaller,
        encryptor,
        required,
        logger,
    )
