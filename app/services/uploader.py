import logging
import posixpath
from typing import Callable, Optional

from app.repos.post_store import CapacityExceeded, PostStore
from app.schemas.preview import UploadErrorKind, UploadResult
from app.services import frontmatter_parser

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"

INVALID_FILE_TYPE_MESSAGE = "Error: please select a .md file."
FILE_READ_FAILURE_MESSAGE = "Failed to read the file."
UPLOAD_IN_PROGRESS_MESSAGE = "Error: another upload is still in progress."


def derive_slug(filename: str) -> str:
    name = posixpath.basename(filename.replace("\\", "/"))
    return name[: -len(MARKDOWN_SUFFIX)] if name.endswith(MARKDOWN_SUFFIX) else name


def _title_for_message(content: str, slug: str) -> str:
    try:
        title = frontmatter_parser.parse(content).metadata.get("title")
        if title:
            return str(title)
    except Exception as e:
        logger.warning(f"Could not read title from frontmatter during upload: {e}")
    return slug


class Uploader:
    """
    Validates an uploaded markdown file and persists it to the post store.

    Failures are reported through the returned UploadResult and status_message,
    never raised.
    """

    def __init__(
        self,
        store: PostStore,
        on_success: Optional[Callable[[str], None]] = None,
    ):
        self.store = store
        self.on_success = on_success
        self.status_message = ""
        self.is_uploading = False

    def reset(self) -> None:
        self.status_message = ""

    async def upload(self, file) -> UploadResult:
        """
        Upload a file-like object exposing ``filename`` and an awaitable
        ``read()``, e.g. FastAPI's UploadFile.
        """
        if self.is_uploading:
            return self._fail(
                UploadErrorKind.UPLOAD_IN_PROGRESS, UPLOAD_IN_PROGRESS_MESSAGE
            )

        filename = getattr(file, "filename", None) or ""
        slug = derive_slug(filename)
        if not filename.endswith(MARKDOWN_SUFFIX) or not slug:
            logger.info(f"Rejected upload with invalid file type: {filename!r}")
            return self._fail(UploadErrorKind.INVALID_FILE_TYPE, INVALID_FILE_TYPE_MESSAGE)

        self.is_uploading = True
        self.status_message = "Uploading..."
        try:
            try:
                data = await file.read()
                content = data.decode("utf-8-sig") if isinstance(data, bytes) else data
            except Exception as e:
                logger.error(f"Failed to read uploaded file {filename}: {e}")
                return self._fail(
                    UploadErrorKind.FILE_READ_FAILURE, FILE_READ_FAILURE_MESSAGE
                )

            title = _title_for_message(content, slug)

            try:
                self.store.set(slug, content)
            except CapacityExceeded as e:
                logger.error(f"Post store is full, could not save {slug}: {e}")
                return self._fail(
                    UploadErrorKind.CAPACITY_EXCEEDED,
                    f"Failed to save: {e}. The storage capacity may have been exceeded.",
                )
            except Exception as e:
                logger.error(f"Failed to save uploaded post {slug}: {e}")
                return self._fail(
                    UploadErrorKind.STORE_WRITE_FAILURE, f"Failed to save: {e}."
                )

            message = f"Saved post '{title}' (slug: {slug}) to the preview store."
            self.status_message = message
            logger.info(message)
            if self.on_success:
                self.on_success(slug)
            return UploadResult(ok=True, message=message, slug=slug, title=title)
        finally:
            self.is_uploading = False

    def _fail(self, kind: UploadErrorKind, message: str) -> UploadResult:
        self.status_message = message
        return UploadResult(ok=False, message=message, error=kind)
