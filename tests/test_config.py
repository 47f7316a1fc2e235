# test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from livedrop.config import get_settings

CONFIG_JSON = Path(__file__).resolve().parents[1] / "livedrop" / "config.json"


def _settings():
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture(autouse=True)
def _fresh_cache():
    yield
    get_settings.cache_clear()


def test_defaults_from_config(monkeypatch):
    monkeypatch.delenv("BACKEND_URL", raising=False)
    monkeypatch.delenv("POLL_INTERVAL_MS", raising=False)
    settings = _settings()
    data = json.loads(CONFIG_JSON.read_text())
    assert settings.backend_url == data["backend_url"] == "http://localhost:8000"
    assert settings.poll_interval_ms == 3000
    assert settings.poll_interval == 3.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("BACKEND_URL", "https://shop.example.com/")
    monkeypatch.setenv("POLL_INTERVAL_MS", "1500")
    settings = _settings()
    assert settings.backend_url == "https://shop.example.com"
    assert settings.poll_interval == 1.5


def test_missing_key_uses_default(monkeypatch):
    monkeypatch.delenv("POLL_INTERVAL_MS", raising=False)
    original = CONFIG_JSON.read_text()
    monkeypatch.setattr(
        Path,
        "read_text",
        lambda self: json.dumps(
            {k: v for k, v in json.loads(original).items() if k != "poll_interval_ms"}
        ),
    )
    assert _settings().poll_interval_ms == 3000


def test_non_positive_interval_rejected(monkeypatch):
    monkeypatch.setenv("POLL_INTERVAL_MS", "0")
    with pytest.raises(ValidationError):
        _settings()


def test_dotenv_file_overrides_config_json(monkeypatch, tmp_path):
    from dotenv import load_dotenv

    monkeypatch.delenv("BACKEND_URL", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("BACKEND_URL=http://from-dotenv:8000\n")
    try:
        load_dotenv(tmp_path / ".env")
        assert _settings().backend_url == "http://from-dotenv:8000"
    finally:
        monkeypatch.delenv("BACKEND_URL", raising=False)


def test_dotenv_file_alone_is_not_read(monkeypatch, tmp_path):
    monkeypatch.delenv("BACKEND_URL", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("BACKEND_URL=http://from-dotenv:8000\n")
    assert _settings().backend_url == "http://localhost:8000"
