import json
import pytest
import structlog
from spa_to_http.config import Settings
from spa_to_http.main import configure_logging, create_app


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("LOGGER", "true")
    monkeypatch.setenv("LOG_PRETTY", "1")
    monkeypatch.setenv("BASE_PATH", "/app/")
    monkeypatch.setenv("IGNORE_CACHE_CONTROL_PATHS", "/sw.js, /manifest.json,")

    settings = Settings()

    assert settings.port == 9000
    assert settings.logger is True
    assert settings.log_pretty is True
    assert settings.mount_path == "/app"
    assert settings.no_cache_paths == ["/sw.js", "/manifest.json"]


def test_settings_defaults(monkeypatch):
    for name in ("ADDRESS", "PORT", "SPA_MODE", "BASE_PATH", "LOGGER", "LOG_PRETTY", "GZIP"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.address == "0.0.0.0"
    assert settings.port == 8080
    assert settings.spa_mode is True
    assert settings.mount_path == "/"
    assert settings.logger is False
    assert settings.log_pretty is False
    assert settings.gzip is False
    assert settings.no_cache_paths == []


@pytest.mark.asyncio
async def test_startup_logs_configuration(spa_dir, capsys, reset_structlog):
    configure_logging()
    app = create_app(Settings(directory=str(spa_dir), logger=True))

    async with app.router.lifespan_context(app):
        pass

    data = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert data["event"] == "server_started"
    assert data["level"] == "info"
    assert data["directory"] == str(spa_dir)
    assert data["request_logging"] is True
