"""Settings module for singlea-redis."""

import os

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _read_secret(name: str, env_var: str, secrets_dir: str = "/run/secrets") -> str | None:
    """Read value from Docker secret or environment."""
    secret_path = os.path.join(secrets_dir, name)
    try:
        with open(secret_path) as f:
            return f.read().strip()
    except FileNotFoundError:
        return os.getenv(env_var)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


class RedisConfig:
    """Redis configuration."""

    def __init__(self, secrets_dir: str = "/run/secrets") -> None:
        self.host = os.getenv("REDIS_HOST", "localhost")
        self.port = int(os.getenv("REDIS_PORT", "6379"))
        self.db = int(os.getenv("REDIS_DB", "0"))
        self.password = _read_secret("redis_password", "REDIS_PASSWORD", secrets_dir)
        # RedisCluster не поддерживает db != 0
        self.cluster = _env_bool("REDIS_CLUSTER", False)
        self.connect_retries = int(os.getenv("REDIS_CONNECT_RETRIES", "5"))
        self.socket_timeout = float(os.getenv("REDIS_SOCKET_TIMEOUT", "5"))


class FeatureConfigStoreConfig:
    """Hash key and flags of the feature config store."""

    def __init__(self) -> None:
        self.key = os.getenv("FEATURE_CONFIG_KEY", "singlea:feature-configs")
        self.required = _env_bool("FEATURE_CONFIG_REQUIRED", False)


class LoggingConfig:
    """Logger configuration."""

    def __init__(self, secrets_dir: str = "/run/secrets") -> None:
        self.level = os.getenv("LOG_LEVEL", "debug")
        # DSN не задан -> пишем JSON в stdout
        self.dsn = _read_secret("log_dsn", "LOG_DSN", secrets_dir)
        self.table = os.getenv("LOG_TABLE", "logs")
        self.batch_size = int(os.getenv("LOG_BATCH_SIZE", "100"))
        self.flush_interval = float(os.getenv("LOG_FLUSH_INTERVAL", "5"))


class Settings:
    """Application settings."""

    def __init__(self, secrets_dir: str = "/run/secrets") -> None:
        self.environment = os.getenv("ENVIRONMENT", "dev")
        self.service_name = os.getenv("SERVICE_NAME", "singlea-redis")

        self.redis = RedisConfig(secrets_dir)
        self.feature_configs = FeatureConfigStoreConfig()
        self.logging = LoggingConfig(secrets_dir)
