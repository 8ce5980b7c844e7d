import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse

from app import dependencies as deps
from app.schemas.preview import (
    IdleResponse,
    LoadState,
    LoadStatus,
    PostView,
    UploadErrorKind,
    UploadResponse,
)
from app.services.post_loader import PostLoader
from app.services.post_presenter import build_post_view, render_body_html
from app.services.uploader import Uploader
from app.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()

IDLE_MESSAGE = (
    "To preview a post, put its slug in the URL "
    f"(e.g. {settings.PREVIEW_BASE_PATH}/your-article-slug) or upload a new .md file."
)

_UPLOAD_ERROR_STATUS = {
    UploadErrorKind.INVALID_FILE_TYPE: 400,
    UploadErrorKind.FILE_READ_FAILURE: 400,
    UploadErrorKind.UPLOAD_IN_PROGRESS: 409,
    UploadErrorKind.CAPACITY_EXCEEDED: 507,
    UploadErrorKind.STORE_WRITE_FAILURE: 500,
}


@router.get("/preview", response_model=IdleResponse)
def preview_index():
    """Instructions shown when no slug is requested."""
    return IdleResponse(message=IDLE_MESSAGE)


@router.get("/preview/{slug}", response_model=PostView)
async def get_preview(slug: str, loader: PostLoader = Depends(deps.get_post_loader)):
    """Load a stored post and return everything needed to render it."""
    try:
        state = await loader.load(slug)
        _raise_for_state(state)
        return build_post_view(state.post, state.authorImageFailed)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error previewing post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to render post")


@router.get("/preview/{slug}/html", response_class=HTMLResponse)
async def get_preview_html(
    slug: str, loader: PostLoader = Depends(deps.get_post_loader)
):
    """Rendered markdown body only."""
    try:
        state = await loader.load(slug)
        _raise_for_state(state)
        return HTMLResponse(render_body_html(state.post.body))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error rendering post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to render post")


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_post(
    file: UploadFile = File(...),
    uploader: Uploader = Depends(deps.get_uploader),
):
    result = await uploader.upload(file)
    if not result.ok:
        raise HTTPException(
            status_code=_UPLOAD_ERROR_STATUS.get(result.error, 500),
            detail=result.message,
        )
    # the response carries the message; clear it for the next upload
    uploader.reset()
    return UploadResponse(
        slug=result.slug,
        title=result.title,
        message=result.message,
        location=f"{settings.PREVIEW_BASE_PATH}/{result.slug}",
    )


def _raise_for_state(state: LoadState) -> None:
    if state.status == LoadStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail=state.error)
    if state.status == LoadStatus.LOAD_ERROR:
        raise HTTPException(status_code=500, detail=state.error)
    if state.status != LoadStatus.LOADED or state.post is None:
        raise HTTPException(status_code=500, detail="Post did not finish loading")
