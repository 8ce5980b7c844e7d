import pycouchdb

from app.repos.post_store import PostStore


class FakeCouchDB:
    """
    Minimal in-memory CouchDB stand-in.
    Set track_calls=True to record the order of get()/save() calls.
    """

    def __init__(self, docs: dict | None = None, track_calls: bool = False):
        self.docs = docs if docs is not None else {}
        self.track_calls = track_calls
        self.calls = []
        self._rev = 0

    def get(self, doc_id: str) -> dict:
        if self.track_calls:
            self.calls.append(f"get({doc_id})")
        if doc_id not in self.docs:
            raise pycouchdb.exceptions.NotFound(doc_id)
        return self.docs[doc_id]

    def save(self, doc: dict) -> dict:
        if self.track_calls:
            self.calls.append(f"save({doc['_id']})")
        current = self.docs.get(doc["_id"])
        if current and current.get("_rev") != doc.get("_rev"):
            raise pycouchdb.exceptions.Conflict("Document update conflict.")
        self._rev += 1
        saved = {**doc, "_rev": f"{self._rev}-abc"}
        self.docs[doc["_id"]] = saved
        return saved


class BoomStore(PostStore):
    """Store whose every call raises the configured exception."""

    def __init__(self, error: Exception):
        super().__init__()
        self.error = error
        self.calls = []

    def get(self, slug):
        self.calls.append(("get", slug))
        raise self.error

    def set(self, slug, raw):
        self.calls.append(("set", slug))
        raise self.error


class FakeUploadFile:
    """
    Minimal UploadFile stand-in: a filename plus an awaitable read().
    """

    def __init__(self, filename: str, content: bytes | str = b"", error=None):
        self.filename = filename
        self.content = content
        self.error = error
        self.read_calls = 0

    async def read(self):
        self.read_calls += 1
        if self.error:
            raise self.error
        return self.content


SAMPLE_POST = """---
title: Hello
date: 2024-06-01
author: Ada
authorID: 3
tags: [a, b]
---

Body text.
"""
