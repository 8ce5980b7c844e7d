import logging

from fastapi import Depends, Request

from app.db.couchdb import get_couch
from app.db.sql import get_session_factory
from app.repos.post_store import (
    CouchPostStore,
    InMemoryPostStore,
    PostStore,
    SqlPostStore,
)
from app.services.post_loader import PostLoader
from app.services.uploader import Uploader
from app.settings import Settings, settings

logger = logging.getLogger(__name__)


def build_post_store(settings_obj: Settings = settings) -> PostStore:
    backend = settings_obj.POST_STORE_BACKEND.lower()
    max_bytes = settings_obj.POST_STORE_MAX_BYTES
    if backend == "memory":
        return InMemoryPostStore(max_bytes=max_bytes)
    if backend == "couchdb":
        return CouchPostStore(get_couch(settings_obj), max_bytes=max_bytes)
    if backend == "sql":
        return SqlPostStore(
            get_session_factory(settings_obj.SQL_DATABASE_URL), max_bytes=max_bytes
        )
    raise ValueError(f"Unknown POST_STORE_BACKEND: {settings_obj.POST_STORE_BACKEND}")


def get_post_store(request: Request) -> PostStore:
    store = getattr(request.app.state, "post_store", None)
    if store is None:
        store = build_post_store()
        request.app.state.post_store = store
        logger.info(f"Post store initialised lazily: {type(store).__name__}")
    return store


def get_post_loader(store=Depends(get_post_store)):
    return PostLoader(store)


def get_uploader(request: Request, store=Depends(get_post_store)):
    # one uploader per app so is_uploading spans concurrent requests
    uploader = getattr(request.app.state, "uploader", None)
    if uploader is None or uploader.store is not store:
        uploader = Uploader(store)
        request.app.state.uploader = uploader
    return uploader
