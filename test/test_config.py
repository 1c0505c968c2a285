from pathlib import Path

from config import DEFAULT_QUOTE_URL, get_settings


def test_defaults(monkeypatch):
    for name in ["TODO_TASKS_FILE", "TODO_QUOTE_URL", "TODO_QUOTE_TIMEOUT", "TODO_HOST",
                 "TODO_PORT", "TODO_CORS_ORIGINS", "TODO_LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.tasks_file == Path("tasks.json")
    assert settings.quote_url == DEFAULT_QUOTE_URL
    assert settings.port == 3000
    assert settings.cors_origins == ["*"]


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("TODO_TASKS_FILE", str(tmp_path / "data.json"))
    monkeypatch.setenv("TODO_QUOTE_URL", "")
    monkeypatch.setenv("TODO_QUOTE_TIMEOUT", "1.5")
    monkeypatch.setenv("TODO_PORT", "not-a-port")
    monkeypatch.setenv("TODO_CORS_ORIGINS", "http://localhost:5173, http://example.com")
    monkeypatch.setenv("TODO_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.tasks_file == tmp_path / "data.json"
    assert settings.quote_url is None
    assert settings.quote_timeout == 1.5
    assert settings.port == 3000
    assert settings.cors_origins == ["http://localhost:5173", "http://example.com"]
    assert settings.log_level == "DEBUG"
