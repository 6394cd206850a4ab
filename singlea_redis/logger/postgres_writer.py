"""PostgreSQL writer для логов с батчингом."""

import json
import sys
import threading
from collections.abc import Sequence
from contextlib import contextmanager
from typing import Any, Iterator

import psycopg2
import psycopg2.extras
from psycopg2 import sql
from psycopg2.extensions import connection as Connection

from singlea_redis.logger.types import LogEntry

_COLUMNS = (
    "timestamp",
    "service_name",
    "environment",
    "level",
    "category",
    "function_name",
    "file_path",
    "line_number",
    "message",
    "error_message",
    "context",
    "ingestion_time",
)


class PostgresWriter:
    """PostgresWriter записывает логи в PostgreSQL с батчингом."""

    def __init__(
        self,
        dsn: str,
        table: str = "logs",
        batch_size: int = 100,
        flush_interval: float = 5.0,
    ) -> None:
        """
        Initialize PostgresWriter.

        Args:
            dsn: PostgreSQL connection string
            table: Таблица для логов
            batch_size: Размер батча для flush
            flush_interval: Интервал автоматического flush в секундах
        """
        self.dsn = dsn
        self.table = table
        self.batch_size = batch_size
        self.flush_interval = flush_interval
        self.buffer: list[LogEntry] = []
        self._lock = threading.Lock()
        self._conn: Connection | None = None
        self._closed = False
        self._stop = threading.Event()
        self._flush_thread: threading.Thread | None = None

    def connect(self) -> None:
        """Подключается к PostgreSQL."""
        try:
            self._conn = psycopg2.connect(self.dsn)
            self._conn.set_session(autocommit=False)
        except Exception as e:
            print(
                f"[LOGGER ERROR] Failed to connect to PostgreSQL: {e}",
                file=sys.stderr,
            )
            raise

        # Запускаем фоновый flush
        if self.flush_interval > 0 and self._flush_thread is None:
            self._flush_thread = threading.Thread(
                target=self._background_flush, name="postgres-log-flush", daemon=True
            )
            self._flush_thread.start()

    def write(self, entry: LogEntry) -> None:
        """Добавляет запись в буфер."""
        if self._closed:
            return

        with self._lock:
            self.buffer.append(entry)
            if len(self.buffer) >= self.batch_size:
                self._flush_locked()

    def write_batch(self, entries: Sequence[LogEntry]) -> None:
        if self._closed:
            return

        with self._lock:
            self.buffer.extend(entries)
            if len(self.buffer) >= self.batch_size:
                self._flush_locked()

    def flush(self) -> None:
        """Принудительно записывает буфер в БД."""
        with self._lock:
            self._flush_locked()

    def _insert_query(self) -> sql.Composed:
        return sql.SQL("INSERT INTO {table} ({columns}) VALUES %s").format(
            table=sql.Identifier(self.table),
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in _COLUMNS),
        )

    @staticmethod
    def _row(entry: LogEntry) -> tuple[Any, ...]:
        return (
            entry.timestamp,
            entry.service_name,
            entry.environment,
            entry.level.value,
            entry.category.value if entry.category else None,
            entry.function_name,
            entry.file_path,
            entry.line_number,
            entry.message,
            entry.error_message,
            json.dumps(entry.context, default=str) if entry.context is not None else None,
            entry.ingestion_time,
        )

    def _flush_locked(self) -> None:
        """Записывает буфер в БД (должен вызываться с захваченным lock)."""
        if not self.buffer:
            return

        if self._conn is None:
            self._fallback_to_stderr()
            self.buffer.clear()
            return

        try:
            with self._conn.cursor() as cursor:
                psycopg2.extras.execute_values(
                    cursor,
                    self._insert_query(),
                    [self._row(entry) for entry in self.buffer],
                    page_size=self.batch_size,
                )
            self._conn.commit()
        except psycopg2.Error as e:
            print(
                f"[LOGGER ERROR] Failed to insert logs into PostgreSQL: {e}",
                file=sys.stderr,
            )
            self._conn.rollback()
            self._fallback_to_stderr()
        finally:
            self.buffer.clear()

    def _fallback_to_stderr(self) -> None:
        """Записывает логи в stderr если PostgreSQL недоступен."""
        for entry in self.buffer:
            print(json.dumps(entry.to_dict(), default=str), file=sys.stderr)

    def _background_flush(self) -> None:
        """Периодически сбрасывает буфер."""
        while not self._stop.wait(self.flush_interval):
            try:
                self.flush()
            except Exception as e:
                print(
                    f"[LOGGER ERROR] Background flush failed: {e}",
                    file=sys.stderr,
                )

    def close(self) -> None:
        """Закрывает writer и сбрасывает оставшиеся логи."""
        self._closed = True

        # Останавливаем фоновый flush
        self._stop.set()
        if self._flush_thread is not None:
            self._flush_thread.join()
            self._flush_thread = None

        # Финальный flush
        self.flush()

        if self._conn:
            self._conn.close()
            self._conn = None


@contextmanager
def create_postgres_writer(
    dsn: str,
    table: str = "logs",
    batch_size: int = 100,
    flush_interval: float = 5.0,
) -> Iterator[PostgresWriter]:
    """
    Context manager для создания PostgresWriter.

    Yields:
        Connected PostgresWriter, closed on exit
    """
    writer = PostgresWriter(dsn, table, batch_size, flush_interval)
    writer.connect()
    try:
        yield writer
    finally:
        writer.close()
