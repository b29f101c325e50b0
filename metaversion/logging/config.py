import contextvars
import threading
from enum import Enum
from typing import List, Literal

from .models import LogLevel, LogLevelName


LogOutput = Literal['stdout', 'stderr']


class StreamType(Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


def to_stream_type(log_output: LogOutput) -> StreamType:
    return StreamType.STDOUT if log_output == 'stdout' else StreamType.STDERR


# Context overrides. None falls through to the process defaults below,
# which new threads see since they start with an empty context.
_global_log_level: contextvars.ContextVar[LogLevel | None] = contextvars.ContextVar(
    "_global_log_level", default=None
)
_global_disabled_loggers: contextvars.ContextVar[tuple[str, ...] | None] = (
    contextvars.ContextVar("_global_disabled_loggers", default=None)
)
_global_log_output_type: contextvars.ContextVar[StreamType | None] = (
    contextvars.ContextVar("_global_log_output_type", default=None)
)

_process_log_level = LogLevel.INFO
_process_log_output_type = StreamType.STDERR
_process_disabled_loggers: tuple[str, ...] = ()
_process_lock = threading.Lock()


class LoggingConfig:
    """
    Logging settings shared by every LoggerStream.

    `set_defaults()` changes the process-wide settings seen by every
    thread. `update()` overrides them for the current context only, so
    a test or task may change them without affecting other contexts.
    """

    def __init__(self) -> None:
        self._log_level = _global_log_level
        self._log_output_type = _global_log_output_type
        self._disabled_loggers = _global_disabled_loggers

    def update(
        self,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
        disabled_loggers: List[str] | None = None,
    ):
        if log_level:
            self._log_level.set(
                LogLevel.to_level(log_level)
            )

        if log_output:
            self._log_output_type.set(to_stream_type(log_output))

        if disabled_loggers is not None:
            self._disabled_loggers.set(tuple(disabled_loggers))

    def set_defaults(
        self,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
        disabled_loggers: List[str] | None = None,
    ):
        global _process_log_level, _process_log_output_type, _process_disabled_loggers

        with _process_lock:
            if log_level:
                _process_log_level = LogLevel.to_level(log_level)

            if log_output:
                _process_log_output_type = to_stream_type(log_output)

            if disabled_loggers is not None:
                _process_disabled_loggers = tuple(disabled_loggers)

    def clear(self):
        """Drop this context's overrides."""
        self._log_level.set(None)
        self._log_output_type.set(None)
        self._disabled_loggers.set(None)

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        return logger_name not in self.disabled_loggers and (
            log_level.severity >= self.level.severity
        )

    @property
    def level(self) -> LogLevel:
        level = self._log_level.get()
        if level is None:
            level = _process_log_level

        return level

    @property
    def output(self) -> StreamType:
        output = self._log_output_type.get()
        if output is None:
            output = _process_log_output_type

        return output

    @property
    def disabled_loggers(self) -> tuple[str, ...]:
        disabled_loggers = self._disabled_loggers.get()
        if disabled_loggers is None:
            disabled_loggers = _process_disabled_loggers

        return disabled_loggers
