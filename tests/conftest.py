# conftest.py
import io
import json
import pytest
from httpx import AsyncClient, ASGITransport


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def make_client():
    def _make(app):
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        # requests carry only the headers a test sets
        del client.headers["user-agent"]
        return client
    return _make


@pytest.fixture
def read_log():
    def _read(output: str) -> list:
        return [json.loads(line) for line in output.splitlines() if line.strip()]
    return _read


@pytest.fixture
def spa_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html><body>spa</body></html>")
    assets = tmp_path / "assets"
    assets.mkdir()
    (assets / "app.js").write_text("console.log('app');" * 200)
    (assets / "style.css").write_text("body { margin: 0; }")
    return tmp_path
