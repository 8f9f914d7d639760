"""
Log sinks consumed by write effects.
"""

from typing import Optional, TextIO

from ..core.effects import LogSink


class LogFileSink:
    """Append-mode file sink writing one flushed line per message."""

    def __init__(self, path: str, encoding: str = "utf-8"):
        self.path = path
        self.encoding = encoding
        self._handle: Optional[TextIO] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self) -> None:
        if self._handle is None:
            self._handle = open(self.path, "a", encoding=self.encoding)

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    def write(self, message: str) -> int:
        """Append ``message`` as a line; returns the number of characters written."""
        if self._handle is None:
            raise ValueError(f"Log sink {self.path} is not open")
        written = self._handle.write(message + "\n")
        self._handle.flush()
        return written


__all__ = ["LogSink", "LogFileSink"]
