from fastapi.testclient import TestClient

from app import dependencies as deps
from app.main import app
from app.repos.post_store import InMemoryPostStore
from app.settings import settings


def test_root_endpoint_runs_lifespan(monkeypatch):
    store = InMemoryPostStore()
    built = []

    def fake_build_post_store():
        built.append(True)
        return store

    monkeypatch.setattr(deps, "build_post_store", fake_build_post_store)

    with TestClient(app) as client:
        res = client.get("/")
        assert res.status_code == 200
        assert res.json() == {"message": "Markdown Preview API is running"}
        assert app.state.post_store is store

    assert built == [True]
    assert app.state.post_store is None


def test_upload_and_preview_share_the_lifespan_store(monkeypatch):
    store = InMemoryPostStore()
    monkeypatch.setattr(deps, "build_post_store", lambda: store)
    monkeypatch.setattr(settings, "LOAD_DELAY_SECONDS", 0)

    with TestClient(app) as client:
        res = client.post(
            "/upload",
            files={"file": ("hello.md", b"---\ntitle: Hi\n---\nBody", "text/markdown")},
        )
        assert res.status_code == 201

        res = client.get("/preview/hello")
        assert res.status_code == 200
        assert res.json()["title"] == "Hi"
        assert res.json()["body"] == "Body"

    assert store.get("hello") == "---\ntitle: Hi\n---\nBody"
