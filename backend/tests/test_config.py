"""Tests for configuration loading."""

import pytest

from canvas_sync.config import DEFAULT_CANVAS_URL, Account, Config, load_config
from canvas_sync.errors import ConfigError


def write_env(tmp_path, text):
    path = tmp_path / ".env"
    path.write_text(text)
    return path


class TestLoadConfig:
    def test_defaults(self, clean_env):
        config = load_config(env_files=[])
        assert config.url == DEFAULT_CANVAS_URL
        assert config.account.username == ""
        assert not config.export_to.any
        assert config.logging.level == "INFO"
        assert config.logging.file_logging is True

    def test_env_file(self, clean_env, tmp_path):
        env = write_env(tmp_path, (
            "CANVAS_URL=https://canvas.example.edu/\n"
            "CANVAS_USERNAME=alice\n"
            "CANVAS_PWD=secret\n"
            "TODOIST_API_KEY=tk\n"
            "TODOIST_EXPORT=true\n"
            "NOTION_EXPORT=no\n"
            "LOG_LEVEL=debug\n"
            "ENABLE_FILE_LOGGING=false\n"
        ))
        config = load_config(env_files=[env])
        assert config.url == "https://canvas.example.edu/"
        assert config.account == Account(username="alice", password="secret")
        assert config.todoist_api_key == "tk"
        assert config.export_to.todoist is True
        assert config.export_to.notion is False
        assert config.logging.level == "DEBUG"
        assert config.logging.file_logging is False

    def test_environment_wins_over_file(self, clean_env, tmp_path):
        env = write_env(tmp_path, "CANVAS_USERNAME=alice\n")
        clean_env.setenv("CANVAS_USERNAME", "bob")
        assert load_config(env_files=[env]).account.username == "bob"

    def test_missing_file_is_ignored(self, clean_env, tmp_path):
        config = load_config(env_files=[tmp_path / "nope.env"])
        assert config.url == DEFAULT_CANVAS_URL


class TestConfig:
    def test_redacted_hides_secrets(self):
        config = Config(account=Account(username="alice", password="secret"),
                        todoist_api_key="tk", notion_api_key="")
        data = config.redacted()
        assert data["account"] == {"username": "alice", "password": "[REDACTED]"}
        assert data["todoist_api_key"] == "[REDACTED]"
        assert data["notion_api_key"] == ""
        assert config.account.password == "secret"

    def test_validate_for_scraping(self):
        with pytest.raises(ConfigError, match="CANVAS_PWD"):
            Config(account=Account(username="alice")).validate_for_scraping()

    def test_valid_for_scraping(self, config):
        config.validate_for_scraping()
