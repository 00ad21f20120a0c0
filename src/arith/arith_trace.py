"""Arith trace watchers.

The VM hands each watcher one line per executed instruction: the offset, the
instruction and the operand stack after it ran, e.g.

    0003 OP_CONSTANT 1 [Int(1), Float(2.0)]
"""

from collections import deque
import logging
from typing import Deque, List, Optional, TextIO


class ArithStdoutTraceWatcher:
    """Watcher that writes trace lines to a text stream (stdout unless given)."""

    def __init__(self, stream: Optional[TextIO] = None, prefix: str = "") -> None:
        self._stream = stream
        self._prefix = prefix

    def on_trace(self, message: str) -> None:
        print(f"{self._prefix}{message}", file=self._stream)


class ArithLoggingTraceWatcher:
    """Watcher that forwards trace lines to a logger at DEBUG level."""

    def __init__(self, logger_name: str = "ArithTrace") -> None:
        self._logger = logging.getLogger(logger_name)

    def on_trace(self, message: str) -> None:
        self._logger.debug(message)


class ArithBufferingTraceWatcher:
    """
    Watcher that keeps trace lines in memory.

    With `max_lines` set only the most recent lines are kept, which bounds
    memory when tracing long programs.
    """

    def __init__(self, max_lines: Optional[int] = None) -> None:
        self._lines: Deque[str] = deque(maxlen=max_lines)

    def __len__(self) -> int:
        return len(self._lines)

    def on_trace(self, message: str) -> None:
        self._lines.append(message)

    def get_traces(self) -> List[str]:
        """Return a copy of the buffered lines, oldest first."""
        return list(self._lines)

    def clear(self) -> None:
        self._lines.clear()
