"""Stream writer: JSON lines to stdout/stderr."""

import json
import sys
from typing import Protocol, TextIO

from singlea_redis.logger.types import Level, LogEntry


class LogWriter(Protocol):
    """Sink for log entries."""

    def write(self, entry: LogEntry) -> None: ...

    def close(self) -> None: ...


class StreamWriter:
    """StreamWriter пишет логи в stdout, ошибки в stderr."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self.out = out
        self.err = err

    def write(self, entry: LogEntry) -> None:
        """Write one entry as a JSON line."""
        # sys.stdout берём в момент записи (pytest capsys подменяет поток)
        if entry.level is Level.ERROR:
            stream = self.err or sys.stderr
        else:
            stream = self.out or sys.stdout
        print(json.dumps(entry.to_dict(), default=str), file=stream)

    def close(self) -> None:
        for stream in (self.out, self.err):
            if stream is not None:
                stream.flush()
