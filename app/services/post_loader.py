import asyncio
import logging
from typing import Callable, List, Optional

from app.repos.post_store import PostStore
from app.schemas.preview import Frontmatter, LoadState, LoadStatus, Post
from app.services import frontmatter_parser
from app.settings import settings

logger = logging.getLogger(__name__)

Listener = Callable[[LoadState], None]

LOAD_ERROR_MESSAGE = (
    "An unexpected error occurred while loading the post. Check the server logs."
)


def not_found_message(slug: str) -> str:
    return (
        f"Post '{slug}' was not found in the preview store. "
        "Check that the file was uploaded and that the slug is correct."
    )


class PostLoader:
    """
    Load state machine for a single preview session.

    Each call to request() starts a new load cycle. Completions belonging to
    an older request are dropped, so only the latest slug's result is applied.
    """

    def __init__(
        self,
        store: PostStore,
        *,
        delay: Optional[float] = None,
        parse: Callable = frontmatter_parser.parse,
    ):
        self.store = store
        self.delay = settings.LOAD_DELAY_SECONDS if delay is None else delay
        self.parse = parse
        self.state = LoadState()
        self._generation = 0
        self._listeners: List[Listener] = []
        self._task: Optional[asyncio.Task] = None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def request(self, slug: Optional[str]) -> Optional[asyncio.Task]:
        """Navigate to a slug. Must be called from within a running event loop."""
        self._generation += 1
        generation = self._generation

        if not slug:
            self._set_state(LoadState(status=LoadStatus.IDLE))
            self._task = None
            return None

        self._set_state(LoadState(status=LoadStatus.LOADING, slug=slug))
        self._task = asyncio.get_running_loop().create_task(
            self._run(slug, generation, self.delay), name=f"load-post:{slug}"
        )
        return self._task

    async def load(self, slug: Optional[str]) -> LoadState:
        task = self.request(slug)
        if task is not None:
            await task
        return self.state

    def mark_author_image_failed(self) -> None:
        if self.state.status != LoadStatus.LOADED or self.state.authorImageFailed:
            return
        logger.warning(f"Author image failed to load for post {self.state.slug}")
        self._set_state(self.state.model_copy(update={"authorImageFailed": True}))

    async def _run(self, slug: str, generation: int, delay: float) -> None:
        await asyncio.sleep(delay)
        if generation != self._generation:
            logger.debug(f"Discarding stale load for {slug} before reading")
            return

        result = self._read(slug)

        if generation != self._generation:
            logger.debug(f"Discarding stale load result for {slug}")
            return
        self._set_state(result)

    def _read(self, slug: str) -> LoadState:
        try:
            raw = self.store.get(slug)
            if raw is None:
                return LoadState(
                    status=LoadStatus.NOT_FOUND,
                    slug=slug,
                    error=not_found_message(slug),
                )

            parsed = self.parse(raw)
            frontmatter = Frontmatter.from_metadata(parsed.metadata)
            if not frontmatter.title:
                logger.warning(f"Post '{slug}' has no title in its frontmatter")

            post = Post(slug=slug, frontmatter=frontmatter, body=parsed.body)
            return LoadState(status=LoadStatus.LOADED, slug=slug, post=post)
        except Exception as e:
            logger.error(f"Failed to load or parse post '{slug}': {e}", exc_info=True)
            return LoadState(
                status=LoadStatus.LOAD_ERROR, slug=slug, error=LOAD_ERROR_MESSAGE
            )

    def _set_state(self, state: LoadState) -> None:
        self.state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Load state listener failed: {e}")
