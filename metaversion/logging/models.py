from __future__ import annotations

import datetime
import threading
from enum import Enum
from typing import Any, Dict, Literal

import msgspec


LogLevelName = Literal[
    'trace',
    'debug',
    'info',
    'warn',
    'error',
    'critical',
    'fatal',
]


class LogLevel(Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    FATAL = "FATAL"

    @classmethod
    def to_level(cls, level_name: LogLevelName) -> LogLevel:
        level = _LEVELS_BY_NAME.get(level_name.upper())
        if level is None:
            raise ValueError(f"Unknown log level: {level_name!r}")

        return level

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_LEVELS_BY_NAME: Dict[str, LogLevel] = {level.value: level for level in LogLevel}

_SEVERITY: Dict[LogLevel, int] = {
    level: rank for rank, level in enumerate(LogLevel)
}


class Entry(msgspec.Struct, kw_only=True):
    """
    Base structured log entry.

    Subclasses add typed fields which become available to templates
    by name, e.g. "{level} - {build_version} - {message}".
    """

    message: str | None = None
    tags: set[str] = msgspec.field(
        default_factory=set,
    )
    level: LogLevel

    def to_template(
        self,
        template: str,
        context: Dict[str, Any] | None = None,
    ) -> str:
        kwargs: Dict[str, Any] = {
            field: getattr(self, field) for field in self.__struct_fields__
        }

        kwargs["level"] = self.level.value

        if context:
            kwargs.update(context)

        return template.format(**kwargs)

    def to_json(self) -> bytes:
        return msgspec.json.encode(self)


class Log(msgspec.Struct, kw_only=True):
    """An entry with the logger name and call site it was emitted from."""

    entry: Entry
    logger: str
    filename: str
    function_name: str
    line_number: int
    thread_id: int = msgspec.field(
        default_factory=threading.get_native_id,
    )
    timestamp: str = msgspec.field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC).isoformat()
    )
