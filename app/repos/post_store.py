import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import pycouchdb
from sqlalchemy.exc import SQLAlchemyError

from app.db.sql import StoredPost

logger = logging.getLogger(__name__)

STORAGE_KEY_PREFIX = "blogPost_"
COUCH_DOC_TYPE = "preview"
_COUCH_TOO_LARGE_ERRORS = {"too_large", "document_too_large"}


class PostStoreError(Exception):
    """Raised when a raw document cannot be written to the store."""


class CapacityExceeded(PostStoreError):
    """Raised when the store medium is full or the document is too large."""


def storage_key(slug: str) -> str:
    if not slug:
        raise ValueError("slug must be a non-empty string")
    return f"{STORAGE_KEY_PREFIX}{slug}"


class PostStore(ABC):
    """
    Key/value store for raw markdown documents, keyed by slug.
    Writes are last-write-wins; there is no delete or list.
    """

    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes

    @abstractmethod
    def get(self, slug: str) -> Optional[str]: ...

    @abstractmethod
    def set(self, slug: str, raw: str) -> None: ...

    def _check_size(self, key: str, raw: str) -> int:
        size = len(raw.encode("utf-8"))
        if self.max_bytes is not None and size > self.max_bytes:
            raise CapacityExceeded(
                f"{key} is {size} bytes, exceeding the {self.max_bytes} byte limit"
            )
        return size


class InMemoryPostStore(PostStore):
    def __init__(
        self, max_bytes: Optional[int] = None, capacity_bytes: Optional[int] = None
    ):
        super().__init__(max_bytes)
        self.capacity_bytes = capacity_bytes
        self.items: Dict[str, str] = {}

    def get(self, slug: str) -> Optional[str]:
        return self.items.get(storage_key(slug))

    def set(self, slug: str, raw: str) -> None:
        key = storage_key(slug)
        size = self._check_size(key, raw)
        if self.capacity_bytes is not None:
            used = sum(
                len(value.encode("utf-8"))
                for k, value in self.items.items()
                if k != key
            )
            if used + size > self.capacity_bytes:
                raise CapacityExceeded(
                    f"Storing {key} needs {size} bytes but only "
                    f"{max(self.capacity_bytes - used, 0)} are free"
                )
        self.items[key] = raw


class CouchPostStore(PostStore):
    def __init__(self, couch_db, max_bytes: Optional[int] = None):
        super().__init__(max_bytes)
        self.db = couch_db

    def get(self, slug: str) -> Optional[str]:
        try:
            doc = self.db.get(storage_key(slug))
        except pycouchdb.exceptions.NotFound:
            return None
        return doc.get("content")

    def set(self, slug: str, raw: str) -> None:
        key = storage_key(slug)
        self._check_size(key, raw)

        doc = {"_id": key, "type": COUCH_DOC_TYPE, "content": raw}
        try:
            try:
                doc["_rev"] = self.db.get(key)["_rev"]
            except pycouchdb.exceptions.NotFound:
                pass
            self.db.save(doc)
        except pycouchdb.exceptions.GenericError as e:
            if _is_too_large(e):
                raise CapacityExceeded(f"CouchDB rejected {key}: {e}") from e
            raise PostStoreError(f"CouchDB write failed for {key}: {e}") from e
        except pycouchdb.exceptions.Error as e:
            raise PostStoreError(f"CouchDB write failed for {key}: {e}") from e
        except Exception as e:
            raise PostStoreError(f"Unexpected CouchDB error for {key}: {e}") from e
        logger.debug(f"Saved {key} to CouchDB")


def _is_too_large(error: Exception) -> bool:
    detail = error.args[0] if error.args else None
    if isinstance(detail, dict):
        return detail.get("error") in _COUCH_TOO_LARGE_ERRORS
    return any(code in str(error) for code in _COUCH_TOO_LARGE_ERRORS)


class SqlPostStore(PostStore):
    def __init__(self, session_factory, max_bytes: Optional[int] = None):
        super().__init__(max_bytes)
        self.session_factory = session_factory

    def get(self, slug: str) -> Optional[str]:
        with self.session_factory() as db:
            record = db.get(StoredPost, storage_key(slug))
            return record.content if record else None

    def set(self, slug: str, raw: str) -> None:
        key = storage_key(slug)
        self._check_size(key, raw)

        with self.session_factory() as db:
            try:
                record = db.get(StoredPost, key)
                if record:
                    record.content = raw
                else:
                    db.add(StoredPost(key=key, content=raw))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PostStoreError(f"Database write failed for {key}: {e}") from e
