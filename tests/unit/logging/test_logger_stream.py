"""
Tests for structured logging.

Tests cover:
- Level parsing and filtering
- Template rendering to stdout and stderr
- JSON logfile output
- Registry load events
"""

import msgspec
import pytest

from metaversion.errors import MissingFeatureError
from metaversion.logging import (
    Entry,
    Logger,
    LoggerStream,
    LoggingConfig,
    LogLevel,
    StreamType,
)
from metaversion.logging.metaversion_logging_models import (
    PeerRejected,
    RegistryLoaded,
)
from metaversion.protocol import FEATURE_HISTORY, CompatibilityRegistry, Feature, Version
from metaversion.protocol.compatibility_registry import LOGGER_NAME


@pytest.fixture
def trace_logging():
    LoggingConfig().update(log_level="trace")


def read_logs(path) -> list[dict]:
    return [
        msgspec.json.decode(line)
        for line in path.read_bytes().splitlines()
    ]


class TestLogLevel:
    """Tests for log level names and ordering."""

    @pytest.mark.parametrize(
        "name,level",
        [
            ("trace", LogLevel.TRACE),
            ("warn", LogLevel.WARN),
            ("FATAL", LogLevel.FATAL),
        ],
    )
    def test_to_level(self, name: str, level: LogLevel):
        assert LogLevel.to_level(name) is level

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            LogLevel.to_level("verbose")

    def test_severity_order(self):
        levels = list(LogLevel)

        assert [level.severity for level in levels] == sorted(
            level.severity for level in levels
        )
        assert LogLevel.TRACE.severity < LogLevel.INFO.severity < LogLevel.FATAL.severity


class TestLoggingConfig:
    """Tests for level and logger filtering."""

    def test_enabled_by_level(self):
        config = LoggingConfig()
        config.update(log_level="warn")

        assert config.enabled("metaversion", LogLevel.ERROR)
        assert config.enabled("metaversion", LogLevel.WARN)
        assert not config.enabled("metaversion", LogLevel.INFO)

    def test_disabled_logger(self):
        config = LoggingConfig()
        config.update(log_level="trace", disabled_loggers=["metaversion.registry"])

        assert not config.enabled("metaversion.registry", LogLevel.FATAL)
        assert config.enabled("metaversion.compatibility", LogLevel.TRACE)

    def test_output(self):
        config = LoggingConfig()
        config.update(log_output="stdout")

        assert config.output == StreamType.STDOUT


class TestEntry:
    """Tests for entry rendering."""

    def test_to_template(self):
        entry = Entry(message="hello", level=LogLevel.INFO)

        assert entry.to_template("{level} - {message} - {extra}", context={"extra": 1}) == "INFO - hello - 1"

    def test_subclass_fields_in_template(self):
        entry = PeerRejected(
            message="rejected",
            peer_role="client",
            peer_version="1.2.675",
            required_version="1.2.676",
            local_version="260205.0.0",
        )

        assert entry.level == LogLevel.WARN
        assert entry.to_template("{peer_role} {peer_version} < {required_version}") == (
            "client 1.2.675 < 1.2.676"
        )

    def test_to_json(self):
        entry = Entry(message="hello", level=LogLevel.ERROR)

        assert msgspec.json.decode(entry.to_json()) == {
            "message": "hello",
            "tags": [],
            "level": "ERROR",
        }


class TestLoggerStream:
    """Tests for writing entries."""

    def test_writes_to_stderr(self, capsys, trace_logging):
        stream = LoggerStream(name="test", template="{level} {message}")
        stream.log(Entry(message="to stderr", level=LogLevel.INFO))

        captured = capsys.readouterr()
        assert captured.err == "INFO to stderr\n"
        assert captured.out == ""

    def test_writes_to_stdout(self, capsys, trace_logging):
        LoggingConfig().update(log_output="stdout")

        stream = LoggerStream(name="test", template="{level} {message}")
        stream.log(Entry(message="to stdout", level=LogLevel.WARN))

        assert capsys.readouterr().out == "WARN to stdout\n"

    def test_default_template_has_caller(self, capsys, trace_logging):
        stream = LoggerStream(name="test")
        stream.log(Entry(message="where", level=LogLevel.INFO))

        line = capsys.readouterr().err
        assert "test_default_template_has_caller" in line
        assert line.rstrip().endswith("- where")

    def test_filters_below_level(self, capsys):
        stream = LoggerStream(name="test")
        stream.log(Entry(message="quiet", level=LogLevel.INFO))

        assert capsys.readouterr().err == ""

    def test_filter_callable(self, capsys, trace_logging):
        stream = LoggerStream(name="test", template="{message}")
        stream.log(
            Entry(message="dropped", level=LogLevel.INFO),
            filter=lambda entry: "keep" in entry.tags,
        )
        stream.log(
            Entry(message="kept", level=LogLevel.INFO, tags={"keep"}),
            filter=lambda entry: "keep" in entry.tags,
        )

        assert capsys.readouterr().err == "kept\n"

    def test_writes_json_logfile(self, tmp_path, trace_logging):
        logfile = tmp_path / "logs" / "registry.json"
        stream = LoggerStream(name="test", path=str(logfile))

        try:
            stream.log(Entry(message="first", level=LogLevel.INFO))
            stream.log(Entry(message="second", level=LogLevel.DEBUG))

        finally:
            stream.close()

        logs = read_logs(logfile)
        assert [log["entry"]["message"] for log in logs] == ["first", "second"]
        assert logs[0]["logger"] == "test"
        assert logs[0]["entry"]["level"] == "INFO"
        assert logs[0]["function_name"] == "test_writes_json_logfile"
        assert logs[0]["filename"].endswith("test_logger_stream.py")


class TestLogger:
    """Tests for the named stream registry."""

    def test_same_stream_per_name(self):
        logger = Logger()

        assert logger["a"] is logger["a"]
        assert logger["a"] is not logger["b"]
        assert logger["a"].name == "a"

    def test_configure_replaces_stream(self, tmp_path):
        logger = Logger()
        first = logger["a"]
        configured = logger.configure(name="a", path=str(tmp_path / "a.json"))

        assert configured is not first
        assert logger["a"] is configured


class TestRegistryLogging:
    """Tests for events logged while loading the registry."""

    @pytest.fixture
    def registry_logfile(self, tmp_path):
        from metaversion.logging import logger

        logfile = tmp_path / "registry.json"
        logger.configure(name=LOGGER_NAME, path=str(logfile))
        yield logfile
        logger.configure(name=LOGGER_NAME)

    def test_logs_each_change_and_load(self, registry_logfile, trace_logging):
        CompatibilityRegistry.from_history(Version(260205, 0, 0))

        logs = read_logs(registry_logfile)
        assert len(logs) == len(FEATURE_HISTORY) + 1

        first = logs[0]["entry"]
        assert first["level"] == "TRACE"
        assert first["role"] == "server"
        assert first["feature"] == "operation/as_is"
        assert first["kind"] == "add"

        loaded = logs[-1]["entry"]
        assert loaded["level"] == "INFO"
        assert loaded["build_version"] == "260205.0.0"
        assert loaded["features"] == len(Feature.all())
        assert loaded["changes"] == len(FEATURE_HISTORY)
        assert loaded["min_server_version"] == "1.2.770"
        assert loaded["min_client_version"] == "1.2.676"

    def test_logs_invalid_history(self, registry_logfile):
        LoggingConfig().update(log_level="info")

        with pytest.raises(MissingFeatureError):
            CompatibilityRegistry.from_history(Version(260205, 0, 0), FEATURE_HISTORY[:-1])

        logs = read_logs(registry_logfile)
        assert len(logs) == 1
        assert logs[0]["entry"]["level"] == "FATAL"
        assert logs[0]["entry"]["error_type"] == "MissingFeatureError"
        assert logs[0]["entry"]["category"] == "CATALOG"
        assert logs[0]["entry"]["context"] == {
            "role": "client",
            "feature": "kv_get_many",
            "build_version": "260205.0.0",
        }

    def test_loaded_entry_type(self):
        entry = RegistryLoaded(
            message="loaded",
            build_version="1.2.869",
            features=27,
            changes=70,
            min_server_version="1.2.764",
            min_client_version="1.2.676",
        )

        assert entry.level == LogLevel.INFO
