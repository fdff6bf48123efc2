import pytest

from openai_images.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from openai_images.config import ConfigError, Settings, load_settings


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    settings = load_settings(environ={})

    assert settings.client.api_key == ""
    assert settings.client.base_url == DEFAULT_BASE_URL
    assert settings.client.timeout == DEFAULT_TIMEOUT
    assert settings.logging.level == "WARNING"
    assert settings.logging.format == "text"


def test_default_file_is_read(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "config.yaml").write_text("client:\n  api_key: file-key\n", encoding="utf-8")

    settings = load_settings(environ={})

    assert settings.client.api_key == "file-key"


def test_named_file_must_exist(tmp_path):
    with pytest.raises(ConfigError) as exc_info:
        load_settings(tmp_path / "missing.yaml", environ={})

    assert "missing.yaml" in str(exc_info.value)


def test_load_from_yaml(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "client:\n"
        "  api_key: file-key\n"
        "  base_url: https://proxy.example.com/v1\n"
        "  timeout: 30\n"
        "logging:\n"
        "  level: DEBUG\n"
        "  format: json\n",
        encoding="utf-8",
    )

    settings = Settings.load(config_path, environ={})

    assert settings.client.api_key == "file-key"
    assert settings.client.base_url == "https://proxy.example.com/v1"
    assert settings.client.timeout == 30.0
    assert settings.logging.level == "DEBUG"
    assert settings.logging.format == "json"


def test_environment_overrides_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("client:\n  api_key: file-key\nlogging:\n  level: DEBUG\n", encoding="utf-8")

    settings = Settings.load(config_path, environ={"OPENAI_API_KEY": "env-key", "LOG_LEVEL": "ERROR"})

    assert settings.client.api_key == "env-key"
    assert settings.logging.level == "ERROR"


def test_empty_file(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("", encoding="utf-8")

    settings = Settings.load(config_path, environ={"OPENAI_API_KEY": "env-key"})

    assert settings.client.api_key == "env-key"


@pytest.mark.parametrize("content", [
    "client: [unclosed\n",
    "- just\n- a list\n",
    "client:\n  timeout: soon\n",
    "client: oops\n",
    "logging: [1, 2]\n",
])
def test_invalid_file(tmp_path, content):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        Settings.load(config_path, environ={})
