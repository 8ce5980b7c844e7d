from pathlib import Path

from app.settings import Settings, choose_env_file


def test_couchdb_url_uses_environment():
    s = Settings(
        COUCHDB_USERNAME="u",
        COUCHDB_PASSWORD="p",
        COUCHDB_HOST="h",
        COUCHDB_PORT=1234,
    )
    assert s.couchdb_url == "http://u:p@h:1234"


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("POST_STORE_BACKEND", "memory")
    monkeypatch.setenv("POST_STORE_MAX_BYTES", "2048")
    monkeypatch.setenv("LOAD_DELAY_SECONDS", "0.5")

    s = Settings()

    assert s.POST_STORE_BACKEND == "memory"
    assert s.POST_STORE_MAX_BYTES == 2048
    assert s.LOAD_DELAY_SECONDS == 0.5


def test_defaults_match_browser_storage_quota():
    s = Settings(_env_file=None)

    assert s.POST_STORE_MAX_BYTES == 5 * 1024 * 1024
    assert s.PREVIEW_BASE_PATH == "/preview"


def test_choose_env_file_prefers_env_local(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: str(self) == ".env.local")
    assert choose_env_file() == ".env.local"


def test_choose_env_file_falls_back(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: False)
    assert choose_env_file() == ".env"
