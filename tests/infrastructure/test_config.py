"""Tests for environment-driven settings."""

import os
from pathlib import Path

import pytest

from coursecart.domain.exceptions import ValidationError
from coursecart.infrastructure.config import load_settings

_NAMES = (
    "API_BASE_URL", "HTTP_TIMEOUT", "CART_FILE", "LOG_LEVEL", "PULSE_SECONDS",
    "MAX_DURATION_WEEKS", "TOKEN", "USER_ID", "ROLE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Keep a developer's .env out of the picture.
    monkeypatch.chdir(tmp_path)
    for name in _NAMES:
        monkeypatch.delenv(f"COURSECART_{name}", raising=False)
    yield
    # load_dotenv writes straight into os.environ.
    for name in _NAMES:
        os.environ.pop(f"COURSECART_{name}", None)


def test_defaults():
    settings = load_settings()
    assert settings.api_base_url == "http://localhost:5000"
    assert settings.http_timeout == 15.0
    assert settings.log_level == "WARNING"
    assert settings.max_duration_weeks == 52
    assert settings.token is None


def test_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("COURSECART_API_BASE_URL", "https://api.example.com/")
    monkeypatch.setenv("COURSECART_CART_FILE", str(tmp_path / "c.json"))
    monkeypatch.setenv("COURSECART_LOG_LEVEL", "debug")
    monkeypatch.setenv("COURSECART_TOKEN", "abc")
    monkeypatch.setenv("COURSECART_ROLE", "educator")

    settings = load_settings()

    assert settings.api_base_url == "https://api.example.com"
    assert settings.cart_file == Path(tmp_path / "c.json")
    assert settings.log_level == "DEBUG"
    assert settings.token == "abc"
    assert settings.role == "educator"


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("COURSECART_USER_ID=u42\n", encoding="utf-8")
    assert load_settings().user_id == "u42"


@pytest.mark.parametrize("name, value", [
    ("HTTP_TIMEOUT", "soon"),
    ("PULSE_SECONDS", "-1"),
    ("LOG_LEVEL", "LOUD"),
])
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(f"COURSECART_{name}", value)
    with pytest.raises(ValidationError):
        load_settings()
