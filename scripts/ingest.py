import asyncio
import logging
import sys
from pathlib import Path

from app.dependencies import build_post_store
from app.services.uploader import Uploader

logger = logging.getLogger(__name__)


class LocalFile:
    """Adapts a path on disk to the filename/read() shape the Uploader expects."""

    def __init__(self, path: Path):
        self.path = path
        self.filename = path.name

    async def read(self) -> bytes:
        return self.path.read_bytes()


async def ingest_dir(directory: Path, uploader: Uploader) -> int:
    saved = 0
    for path in sorted(directory.glob("*.md")):
        result = await uploader.upload(LocalFile(path))
        if result.ok:
            saved += 1
        else:
            logger.warning(f"Skipped {path}: {result.message}")
    return saved


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    directory = Path(sys.argv[1] if len(sys.argv) > 1 else ".")
    try:
        count = asyncio.run(ingest_dir(directory, Uploader(build_post_store())))
        logger.info(f"Ingestion completed successfully: {count} posts saved.")
    except Exception as e:
        logger.error(f"Ingestion failed: {e}", exc_info=True)
        sys.exit(1)
