"""Environment parsing for application settings."""

from souq.core.config import Settings


def test_cors_origins_accept_comma_separated_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://souq.example, https://admin.souq.example")
    assert Settings().CORS_ORIGINS == [
        "https://souq.example",
        "https://admin.souq.example",
    ]


def test_cors_origins_accept_json_list_env(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", '["https://souq.example"]')
    assert Settings().CORS_ORIGINS == ["https://souq.example"]


def test_defaults_without_env(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.delenv("RATE_LIMIT_ENABLED", raising=False)
    s = Settings(_env_file=None)
    assert "http://localhost" in s.CORS_ORIGINS
    assert s.RATE_LIMIT_ENABLED is True
    assert s.DEFAULT_CURRENCY == "EGP"
