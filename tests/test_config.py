# tests/test_config.py
from __future__ import annotations

import pytest
import yaml

from lc.config import (DEFAULT_SYSTEM_PROMPT, Config, get_config_path,
                       user_config_dir)
from lc.errors import ConfigError, ConfigWriteError


def test_missing_file_gives_defaults(app_dir):
    config = Config.load()
    assert config.openai_base_url == "https://api.openai.com/v1"
    assert config.max_history == 10
    assert config.default_model == "gpt-4o-mini"
    assert config.openai_api_key == ""
    assert config.system_prompt == DEFAULT_SYSTEM_PROMPT


def test_config_path_lives_in_app_dir(app_dir):
    assert get_config_path() == app_dir / "config.yaml"


def test_missing_field_falls_back_to_default(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "openai_api_key: sk-test\n"
        "openai_base_url: http://localhost:8080/v1\n"
        "default_model: llama3\n"
        "system_prompt: be brief\n",
        encoding="utf-8",
    )
    config = Config.load(path)
    assert config.openai_api_key == "sk-test"
    assert config.openai_base_url == "http://localhost:8080/v1"
    assert config.system_prompt == "be brief"
    assert config.max_history == 10


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert Config.load(path) == Config()


@pytest.mark.parametrize(
    "body",
    [
        "openai_api_key: [unterminated\n",
        "- just\n- a list\n",
        "max_history: lots\n",
    ],
)
def test_unparseable_config_is_an_error(tmp_path, body):
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        Config.load(path)


def test_non_utf8_config_is_an_error(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_bytes(b"default_model: \xff\xfe\n")
    with pytest.raises(ConfigError, match="Failed to read config file"):
        Config.load(path)


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    original = Config(openai_api_key="sk-1", max_history=4, system_prompt="line one\nline two")
    original.save(path)
    assert Config.load(path) == original
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["max_history"] == 4


def test_set_value_persists(tmp_path):
    path = tmp_path / "config.yaml"
    config = Config()
    config.set_value("default_model", "gpt-4o", path=path)
    config.set_value("max_history", "3", path=path)
    reloaded = Config.load(path)
    assert reloaded.default_model == "gpt-4o"
    assert reloaded.max_history == 3


def test_set_value_rejects_unknown_key(tmp_path):
    path = tmp_path / "config.yaml"
    with pytest.raises(ConfigError, match="Unknown config key: colour"):
        Config().set_value("colour", "blue", path=path)
    assert not path.exists()


@pytest.mark.parametrize("value", ["ten", "-1", ""])
def test_set_value_rejects_bad_max_history(tmp_path, value):
    with pytest.raises(ConfigError, match="Invalid max_history"):
        Config().set_value("max_history", value, path=tmp_path / "config.yaml")


def test_save_failure_is_a_write_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(ConfigWriteError):
        Config().save(blocker / "config.yaml")


def test_redacted_masks_api_key():
    data = Config(openai_api_key="sk-secret").redacted()
    assert data["openai_api_key"] == "sk-***"
    assert "secret" not in str(data)


def test_xdg_config_home_is_honoured(monkeypatch, tmp_path):
    monkeypatch.setattr("lc.config.sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert user_config_dir() == tmp_path
