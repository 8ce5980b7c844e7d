import datetime
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


def _convert_date(value):
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


def _normalize_tags(value) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


class Frontmatter(BaseModel):
    """
    Typed view over a frontmatter mapping.
    Unrecognized keys are kept as extras and never cause validation errors.
    """

    model_config = ConfigDict(extra="allow")

    title: Optional[str] = None
    date: Optional[str] = None
    summary: Optional[str] = None
    author: Optional[str] = None
    authorID: Optional[int] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "date", "summary", "author", mode="before")
    @classmethod
    def _stringify(cls, value):
        value = _convert_date(value)
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("authorID", mode="before")
    @classmethod
    def _coerce_author_id(cls, value):
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, float) and not value.is_integer():
            logger.warning(f"Ignoring non-integral authorID: {value!r}")
            return None
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Ignoring non-integer authorID: {value!r}")
            return None

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value):
        return _normalize_tags(value)

    @classmethod
    def from_metadata(cls, metadata: Dict[Any, Any]) -> "Frontmatter":
        # pydantic requires string keys for extras
        return cls.model_validate({str(k): v for k, v in (metadata or {}).items()})

    @property
    def extras(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class ParsedContent(BaseModel):
    metadata: Dict[Any, Any] = Field(default_factory=dict)
    body: str


class Post(BaseModel):
    slug: str = Field(min_length=1)
    frontmatter: Frontmatter
    body: str


class LoadStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    LOAD_ERROR = "load_error"


class LoadState(BaseModel):
    status: LoadStatus = LoadStatus.IDLE
    slug: Optional[str] = None
    post: Optional[Post] = None
    error: Optional[str] = None
    authorImageFailed: bool = False


class UploadErrorKind(str, Enum):
    INVALID_FILE_TYPE = "invalid_file_type"
    FILE_READ_FAILURE = "file_read_failure"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    STORE_WRITE_FAILURE = "store_write_failure"
    UPLOAD_IN_PROGRESS = "upload_in_progress"


class UploadResult(BaseModel):
    ok: bool
    message: str
    slug: Optional[str] = None
    title: Optional[str] = None
    error: Optional[UploadErrorKind] = None


class UploadResponse(BaseModel):
    slug: str
    title: str
    message: str
    location: str


class IdleResponse(BaseModel):
    status: LoadStatus = LoadStatus.IDLE
    message: str


class PostView(BaseModel):
    slug: str
    title: str
    date: Optional[str] = None
    displayDate: Optional[str] = None
    summary: Optional[str] = None
    author: Optional[str] = None
    authorImage: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    body: str
    html: str
    shareUrl: str
    twitterShareUrl: str
    extras: Dict[str, Any] = Field(default_factory=dict)
