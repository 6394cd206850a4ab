"""Logger module for singlea-redis."""

from singlea_redis.logger.logger import (
    Logger,
    get_logger,
    has_logger,
    init_logger,
    reset_logger,
)
from singlea_redis.logger.postgres_writer import PostgresWriter, create_postgres_writer
from singlea_redis.logger.stream_writer import LogWriter, StreamWriter
from singlea_redis.logger.types import Category, Field, Level, LogEntry

__all__ = [
    "Logger",
    "get_logger",
    "has_logger",
    "init_logger",
    "reset_logger",
    "LogWriter",
    "StreamWriter",
    "PostgresWriter",
    "create_postgres_writer",
    "Category",
    "Level",
    "LogEntry",
    "Field",
]
