"""
PyShell Logger Module

Logging for the shell engine:
- Subsystem-specific loggers ('parser', 'registry', 'executor', ...)
- Structured context attached to each record
- Console, file and in-memory outputs
- Thread-safe initialization

Author: YSNRFD
Version: 1.0.0
"""

import logging
import sys
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Optional, Any, List, Union


class LogLevel(IntEnum):
    """Log level enumeration with numeric values for comparison."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @classmethod
    def from_name(cls, name: str) -> 'LogLevel':
        """Look up a level by name, falling back to INFO."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return cls.INFO


class LogFormatter(logging.Formatter):
    """
    Log formatter for PyShell.

    Output layout:
        12:00:01.250 DEBUG    executor <ls>: Executing command: ls arguments=['-l']

    The 'command' context key, when present, is shown in angle brackets
    after the subsystem; remaining context follows the message.
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream=None):
        super().__init__()
        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and getattr(stream, 'isatty', lambda: False)()

    def _level(self, name: str) -> str:
        padded = f"{name:8s}"
        if self.use_colors and name in self.COLORS:
            return f"{self.COLORS[name]}{padded}{self.RESET}"
        return padded

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record."""
        stamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]
        subsystem = getattr(record, 'subsystem', None) or record.name.rpartition('.')[2]

        context = dict(getattr(record, 'context', None) or {})
        command = context.pop('command', None)

        head = f"{stamp} {self._level(record.levelname)} {subsystem}"
        if command:
            head += f" <{command}>"

        text = f"{head}: {record.getMessage()}"
        if context:
            text += " " + " ".join(f"{k}={v!r}" for k, v in context.items())

        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


@dataclass(frozen=True)
class LogEntry:
    """A log record kept in memory."""
    timestamp: float
    level: int
    subsystem: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def command(self) -> Optional[str]:
        return self.context.get('command')

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)


class LogBufferHandler(logging.Handler):
    """
    Keeps the most recent log records in memory.

    Lets tests and embedding applications inspect what the engine
    logged without touching the console.
    """

    def __init__(self, capacity: int = 2000):
        super().__init__()
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._entries_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            timestamp=record.created,
            level=record.levelno,
            subsystem=getattr(record, 'subsystem', None) or record.name,
            message=record.getMessage(),
            context=dict(getattr(record, 'context', None) or {}),
        )
        with self._entries_lock:
            self._entries.append(entry)

    def entries(
        self,
        min_level: int = LogLevel.DEBUG,
        subsystem: Optional[str] = None,
        limit: int = 100
    ) -> List[LogEntry]:
        """Most recent entries at or above min_level, oldest first."""
        with self._entries_lock:
            snapshot = list(self._entries)

        selected = [
            e for e in snapshot
            if e.level >= min_level and (subsystem is None or e.subsystem == subsystem)
        ]
        return selected[-limit:] if limit else selected

    def clear(self) -> None:
        with self._entries_lock:
            self._entries.clear()


class Logger:
    """
    Main logging class for PyShell.

    One instance exists per subsystem name; all of them write through
    the 'pyshell' logger hierarchy of the standard logging module.
    Until initialize() is called the package only carries a NullHandler,
    so an embedding application keeps full control of logging output.

    Example:
        >>> log = Logger('executor')
        >>> log.debug("Executing", context={'command': 'ls'})
    """

    _instances: dict[str, 'Logger'] = {}
    _lock = threading.Lock()
    _initialized = False
    _buffer_handler: Optional[LogBufferHandler] = None

    def __new__(cls, subsystem: str = 'shell') -> 'Logger':
        """Get or create a logger for a subsystem."""
        with cls._lock:
            if subsystem not in cls._instances:
                instance = super().__new__(cls)
                instance._subsystem = subsystem
                instance._logger = logging.getLogger(f'pyshell.{subsystem}')
                cls._instances[subsystem] = instance
            return cls._instances[subsystem]

    @property
    def subsystem(self) -> str:
        return self._subsystem

    @classmethod
    def initialize(
        cls,
        level: Union[int, str] = LogLevel.INFO,
        log_file: Optional[str] = None,
        console_output: bool = True,
        use_colors: bool = True
    ) -> None:
        """
        Initialize the logging system.

        Only the first call configures handlers; later calls are ignored.

        Args:
            level: Minimum level, as a number or a name such as 'DEBUG'
            log_file: Optional file path for log output
            console_output: Whether to log to stderr
            use_colors: Whether to use ANSI colors in console output
        """
        if isinstance(level, str):
            level = LogLevel.from_name(level)

        with cls._lock:
            if cls._initialized:
                return

            package_logger = logging.getLogger('pyshell')
            package_logger.setLevel(level)

            cls._buffer_handler = LogBufferHandler()
            package_logger.addHandler(cls._buffer_handler)

            if console_output:
                console = logging.StreamHandler(sys.stderr)
                console.setFormatter(LogFormatter(use_colors=use_colors))
                package_logger.addHandler(console)

            if log_file:
                path = Path(log_file).expanduser()
                path.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(path, encoding='utf-8')
                file_handler.setFormatter(LogFormatter(use_colors=False))
                package_logger.addHandler(file_handler)

            cls._initialized = True

    @classmethod
    def get_buffered_logs(
        cls,
        min_level: int = LogLevel.DEBUG,
        subsystem: Optional[str] = None,
        limit: int = 100
    ) -> List[LogEntry]:
        """Get entries from the in-memory buffer; empty before initialize()."""
        if cls._buffer_handler is None:
            return []
        return cls._buffer_handler.entries(min_level, subsystem, limit)

    def is_debug_enabled(self) -> bool:
        return self._logger.isEnabledFor(LogLevel.DEBUG)

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[dict[str, Any]] = None,
        exc_info: Any = None
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {
            'subsystem': self._subsystem,
            'context': context or {},
        }
        self._logger.log(level, message, extra=extra, exc_info=exc_info)

    def debug(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
        exc_info: Any = None
    ) -> None:
        self._log(LogLevel.DEBUG, message, context, exc_info)

    def info(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.INFO, message, context)

    def warning(self, message: str, context: Optional[dict[str, Any]] = None) -> None:
        self._log(LogLevel.WARNING, message, context)

    def error(
        self,
        message: str,
        context: Optional[dict[str, Any]] = None,
        exc_info: Any = None
    ) -> None:
        self._log(LogLevel.ERROR, message, context, exc_info)


def get_logger(subsystem: str) -> Logger:
    """
    Get a logger for the specified subsystem.

    Args:
        subsystem: Name of the subsystem (e.g., 'parser', 'executor')

    Returns:
        Logger instance for the subsystem
    """
    return Logger(subsystem)
