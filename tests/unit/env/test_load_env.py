"""
Tests for environment configuration loading.
"""

import pytest
from pydantic import ValidationError

from metaversion.env import Env, load_env


class TestLoadEnv:
    """Tests for building Env from the environment and dotenv files."""

    def test_defaults(self):
        env = load_env(Env)

        assert env.METAVERSION_BUILD_VERSION is None
        assert env.METAVERSION_LOG_LEVEL == "info"
        assert env.METAVERSION_LOG_OUTPUT == "stderr"
        assert env.METAVERSION_LOG_PATH is None

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("METAVERSION_LOG_LEVEL", "debug")
        monkeypatch.setenv("METAVERSION_BUILD_VERSION", "1.2.770")

        env = load_env(Env)

        assert env.METAVERSION_LOG_LEVEL == "debug"
        assert env.METAVERSION_BUILD_VERSION == "1.2.770"

    def test_reads_default_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("METAVERSION_LOG_OUTPUT=stdout\n")

        assert load_env(Env).METAVERSION_LOG_OUTPUT == "stdout"

    def test_reads_named_dotenv_file(self, tmp_path):
        env_file = tmp_path / "release.env"
        env_file.write_text(
            "METAVERSION_BUILD_VERSION=1.2.869\n"
            "UNRELATED_SETTING=ignored\n"
        )

        env = load_env(Env, env_file=str(env_file))

        assert env.METAVERSION_BUILD_VERSION == "1.2.869"
        assert not hasattr(env, "UNRELATED_SETTING")

    def test_dotenv_file_overrides_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("METAVERSION_LOG_LEVEL", "debug")
        (tmp_path / ".env").write_text("METAVERSION_LOG_LEVEL=warn\n")

        assert load_env(Env).METAVERSION_LOG_LEVEL == "warn"

    def test_override_wins(self, monkeypatch):
        monkeypatch.setenv("METAVERSION_LOG_OUTPUT", "stderr")

        env = load_env(Env, override=Env(METAVERSION_LOG_OUTPUT="stdout"))

        assert env.METAVERSION_LOG_OUTPUT == "stdout"

    def test_missing_dotenv_file_is_ignored(self):
        env = load_env(Env, env_file="does-not-exist.env")

        assert env.METAVERSION_LOG_LEVEL == "info"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("METAVERSION_LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError):
            load_env(Env)
