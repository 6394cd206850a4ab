"""Wiring of the feature config store from settings."""

from typing import Any

from singlea_redis.config.settings import LoggingConfig, Settings
from singlea_redis.domain.contracts import (
    FeatureConfigEncryptor,
    FeatureConfigManager,
    FeatureConfigMarshaller,
    SupportsDebug,
)
from singlea_redis.logger.logger import Logger, get_logger, has_logger, init_logger
from singlea_redis.logger.postgres_writer import PostgresWriter
from singlea_redis.logger.stream_writer import LogWriter, StreamWriter
from singlea_redis.logger.types import Category, param
from singlea_redis.repository.feature_config_manager import create_feature_config_manager
from singlea_redis.storage.client import RedisClient


def create_log_writer(config: LoggingConfig) -> LogWriter:
    """PostgresWriter if LOG_DSN is set, otherwise StreamWriter."""
    if not config.dsn:
        return StreamWriter()

    writer = PostgresWriter(
        config.dsn,
        table=config.table,
        batch_size=config.batch_size,
        flush_interval=config.flush_interval,
    )
    writer.connect()
    return writer


def init_logging(settings: Settings) -> Logger:
    """Initialize the global logger from settings."""
    logger = init_logger(
        settings.service_name,
        settings.environment,
        create_log_writer(settings.logging),
        settings.logging.level,
    )
    logger.with_category(Category.CONFIG).info(
        "Logger initialized",
        param("level", logger.level.value),
        param("writer", type(logger.writer).__name__),
    )
    return logger


def build_feature_config_manager(
    settings: Settings,
    marshaller: FeatureConfigMarshaller,
    encryptor: FeatureConfigEncryptor,
    redis: Any = None,
    logger: SupportsDebug | None = None,
) -> FeatureConfigManager:
    """
    Build the feature config manager described by settings.

    Args:
        settings: Application settings
        marshaller: Feature config marshaller
        encryptor: Encryptor for marshalled configs
        redis: Ready client; connects via RedisClient(settings.redis) when None
        logger: Logger override; global logger (category REDIS) when None

    Returns:
        FeatureConfigManager bound to settings.feature_configs.key
    """
    if redis is None:
        redis = RedisClient(settings.redis).connect()

    if logger is None and has_logger():
        logger = get_logger().with_category(Category.REDIS)

    return create_feature_config_manager(
        settings.feature_configs.key,
        redis,
        marshaller,
        encryptor,
        settings.feature_configs.required,
        logger,
    )
