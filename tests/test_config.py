"""Tests for settings loading and store endpoint parsing."""

import pytest
from pydantic import ValidationError

from chroma_gateway.config import Settings, load_settings


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setattr("chroma_gateway.config.load_dotenv", lambda: None)
    for name in ("CHROMA_HOST", "PORT", "DISABLE_SSL_VERIFICATION", "CHROMA_ALLOW_RESET", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("API_KEY", "secret")
    return monkeypatch


def test_defaults(env):
    settings = load_settings()
    assert settings.chroma_host == "http://localhost:8000"
    assert settings.port == 3000
    assert settings.disable_ssl_verification is False
    assert settings.cors_origins == ("*",)


@pytest.mark.parametrize("missing", ["OPENAI_API_KEY", "API_KEY"])
def test_required_variables(env, missing):
    env.delenv(missing)
    with pytest.raises(ValueError, match=f"{missing} environment variable is required"):
        load_settings()


def test_flags_and_lists(env):
    env.setenv("DISABLE_SSL_VERIFICATION", "true")
    env.setenv("CHROMA_ALLOW_RESET", "yes")
    env.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    env.setenv("PORT", "8080")

    settings = load_settings()
    assert settings.disable_ssl_verification is True
    assert settings.allow_reset is False
    assert settings.cors_origins == ("http://a.test", "http://b.test")
    assert settings.port == 8080


def test_settings_are_frozen():
    settings = Settings(openai_api_key="k", api_key="a")
    with pytest.raises(ValidationError):
        settings.api_key = "other"


@pytest.mark.parametrize(
    "host, expected",
    [
        ("http://localhost:8000", ("localhost", 8000, False)),
        ("https://chroma.example.com", ("chroma.example.com", 443, True)),
        ("https://chroma.example.com:9443", ("chroma.example.com", 9443, True)),
        ("http://chroma.internal", ("chroma.internal", 8000, False)),
        ("chroma.internal", ("chroma.internal", 8000, False)),
    ],
)
def test_chroma_endpoint(host, expected):
    settings = Settings(openai_api_key="k", api_key="a", chroma_host=host)
    assert settings.chroma_endpoint() == expected
