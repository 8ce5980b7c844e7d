import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app import dependencies as deps
from app.routers import preview
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Markdown Preview API",
    description="Upload markdown posts with YAML frontmatter and preview them",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.post_store = deps.build_post_store()
    logger.info(
        f"Post store ready ({settings.POST_STORE_BACKEND}): "
        f"{type(app.state.post_store).__name__}"
    )

    try:
        yield
    finally:
        app.state.post_store = None
        app.state.uploader = None
        logger.info("Post store released")


app.router.lifespan_context = lifespan

app.include_router(preview.router)


@app.get("/")
async def root():
    return {"message": "Markdown Preview API is running"}
