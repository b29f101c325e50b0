from .config import (
    LoggingConfig as LoggingConfig,
    LogOutput as LogOutput,
    StreamType as StreamType,
)
from .models import (
    Entry as Entry,
    Log as Log,
    LogLevel as LogLevel,
    LogLevelName as LogLevelName,
)
from .stream import (
    Logger as Logger,
    LoggerStream as LoggerStream,
    logger as logger,
)
