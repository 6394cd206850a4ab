"""Encrypted feature config storage in a Redis hash."""

from singlea_redis.domain.errors import DecryptionError, FeatureConfigError, MarshallingError
from singlea_redis.marshaller.encryptor import FernetFeatureConfigEncryptor
from singlea_redis.marshaller.json_marshaller import JsonFeatureConfigMarshaller
from singlea_redis.repository.feature_config_manager import (
    RedisFeatureConfigManager,
    create_feature_config_manager,
)
from singlea_redis.storage.hash_store import (
    CommandHashStore,
    HashStore,
    RedisHashStore,
    wrap_redis,
)

__all__ = [
    "RedisFeatureConfigManager",
    "create_feature_config_manager",
    "HashStore",
    "RedisHashStore",
    "CommandHashStore",
    "wrap_redis",
    "JsonFeatureConfigMarshaller",
    "FernetFeatureConfigEncryptor",
    "FeatureConfigError",
    "DecryptionError",
    "MarshallingError",
]
