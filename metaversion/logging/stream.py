from __future__ import annotations

import datetime
import io
import os
import pathlib
import sys
import threading
from typing import Callable, Dict, TypeVar

import msgspec

from .config import LoggingConfig, StreamType
from .models import Entry, Log


T = TypeVar('T', bound=Entry)


DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
ERROR_TEMPLATE = "{timestamp} - {level} - {thread_id}.{filename}:{function_name}.{line_number} - {error}"


class LoggerStream:
    """
    Synchronous structured logger.

    Entries are rendered through a template to stdout or stderr, or
    appended as JSON encoded Log lines when a logfile path is given.
    """

    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._default_template = template
        self._default_logfile_path = (
            str(pathlib.Path(path).absolute()) if path else None
        )

        self._config = LoggingConfig()
        self._files: Dict[str, io.BufferedWriter] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def log(
        self,
        entry: T,
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if template is None:
            template = self._default_template

        logfile_path = (
            str(pathlib.Path(path).absolute()) if path else self._default_logfile_path
        )

        if logfile_path:
            self._log_to_file(
                entry,
                logfile_path,
                filter=filter,
            )

        else:
            self._log(
                entry,
                template=template,
                filter=filter,
            )

    def _log(
        self,
        entry: Entry,
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        if template is None:
            template = DEFAULT_TEMPLATE

        log_file, line_number, function_name = self._find_caller()
        context = {
            "filename": log_file,
            "function_name": function_name,
            "line_number": line_number,
            "thread_id": threading.get_native_id(),
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
        }

        stream = sys.stdout if self._config.output == StreamType.STDOUT else sys.stderr

        with self._lock:
            stream.write(entry.to_template(template, context=context) + "\n")
            stream.flush()

    def _log_to_file(
        self,
        entry: Entry,
        logfile_path: str,
        filter: Callable[[T], bool] | None = None,
    ):
        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        log_file, line_number, function_name = self._find_caller()
        log = Log(
            entry=entry,
            logger=self._name,
            filename=log_file,
            function_name=function_name,
            line_number=line_number,
        )

        with self._lock:
            try:
                logfile = self._open_file(logfile_path)
                logfile.write(msgspec.json.encode(log) + b"\n")
                logfile.flush()

            except OSError as err:
                sys.stderr.write(
                    entry.to_template(
                        ERROR_TEMPLATE,
                        context={
                            "filename": log_file,
                            "function_name": function_name,
                            "line_number": line_number,
                            "error": str(err),
                            "thread_id": threading.get_native_id(),
                            "timestamp": log.timestamp,
                        },
                    ) + "\n"
                )

    def _open_file(self, logfile_path: str) -> io.BufferedWriter:
        logfile = self._files.get(logfile_path)
        if logfile is None or logfile.closed:
            os.makedirs(os.path.dirname(logfile_path), exist_ok=True)
            logfile = open(logfile_path, "ab")
            self._files[logfile_path] = logfile

        return logfile

    def close(self):
        with self._lock:
            for logfile in self._files.values():
                if logfile.closed is False:
                    logfile.close()

            self._files.clear()

    def _find_caller(self):
        """
        Find the stack frame of the caller so that we can note the source
        file name, line number and function name.
        """
        frame = sys._getframe(3)
        code = frame.f_code

        return (
            code.co_filename,
            frame.f_lineno,
            code.co_name,
        )


class Logger:
    """Named LoggerStream registry."""

    def __init__(self) -> None:
        self._streams: Dict[str, LoggerStream] = {}
        self._lock = threading.Lock()

    def __getitem__(self, name: str) -> LoggerStream:
        with self._lock:
            if self._streams.get(name) is None:
                self._streams[name] = LoggerStream(name=name)

            return self._streams[name]

    def configure(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ) -> LoggerStream:
        if name is None:
            name = 'default'

        with self._lock:
            previous = self._streams.get(name)
            if previous:
                previous.close()

            self._streams[name] = LoggerStream(
                name=name,
                template=template,
                path=path,
            )

            return self._streams[name]


logger = Logger()
