import logging

from shorturl_app.config import settings
from shorturl_app.exceptions import NotFound
from shorturl_app.schemas.url import URLRecord
from shorturl_app.storage.sequence import SequenceAllocatorStrategy
from shorturl_app.storage.strategies import RecordStoreStrategy
from shorturl_app.validation.validator import URLValidator

logger = logging.getLogger(__name__)


class ShorteningService:
    """
    Shortening service with injected validator, store and allocator.

    This follows the Dependency Injection pattern:
    - Collaborators are injected (not created internally)
    - Easy to test (inject a fake resolver, an in-test database)
    - Flexible (SQL or Mongo without changing this code)

    The service holds no state of its own; all shared state lives in the
    store, and the counter relies on the store's atomic increment.
    """

    def __init__(
        self,
        validator: URLValidator,
        store: RecordStoreStrategy,
        allocator: SequenceAllocatorStrategy,
        namespace: str = settings.counter_namespace,
    ):
        self.validator = validator
        self.store = store
        self.allocator = allocator
        self.namespace = namespace

    async def shorten(self, url: str) -> URLRecord:
        """Return the record for `url`, creating it on first submission.

        Process:
        1. Validate (pattern, then DNS); failures propagate unchanged
        2. Return the existing record if this URL was shortened before
        3. Allocate the next value from the counter
        4. Insert and return the new record

        De-duplication is best-effort: two concurrent first submissions of
        the same URL can both miss step 2 and get distinct short URLs.
        """
        await self.validator.validate(url)

        existing = self.store.find_by_original_url(url)
        if existing:
            logger.debug("Reusing short URL %s for %s", existing.short_url, url)
            return existing

        short_url = self.allocator.next(self.namespace)
        record = self.store.insert(url, short_url)
        logger.info("Shortened %s -> %s", url, short_url)
        return record

    async def resolve(self, short_url: int) -> str:
        """Return the original URL for a short URL.

        Raises:
            NotFound: nothing was assigned to `short_url`
        """
        record = self.store.find_by_short_url(short_url)
        if record is None:
            raise NotFound(f"No record for short URL {short_url}")
        return record.original_url
