import logging
import random
import uuid
from collections import Counter
from datetime import timedelta
from typing import List, Optional, Sequence

from shortlink_app.exceptions import (
    BatchCreateError,
    InvalidShortCodeError,
    InvalidUrlError,
    PersistenceError,
    ShortCodeTakenError,
    ShortenerError,
    StorageReadError,
)
from shortlink_app.schemas.url import (
    ClickRecord,
    CreateUrlRequest,
    RegistrySummary,
    UrlRecord,
    UrlStats,
)
from shortlink_app.services import validators
from shortlink_app.services.short_code_strategies import (
    RandomShortCodeStrategy,
    ShortCodeStrategy,
)
from shortlink_app.storage.record_store import UrlRecordStore
from shortlink_app.utils.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class URLService:
    """
    Registry of short URLs: the only reader and writer of the record store.

    Store, clock and short code strategy are injected, so the service can be
    driven with in-memory storage and a fixed clock in tests.

    Every operation is synchronous and does one full read-modify-write of
    the store. There is no locking: a single writer is assumed.

    Error policy differs by direction:
    - Reads (get_all_urls and the lookups built on it) log storage failures
      and return empty results.
    - Writes raise PersistenceError. A write that cannot read the current
      store also raises it rather than overwrite data it could not decode.
    """

    # Simulated locations attached to click events
    LOCATIONS = (
        "San Francisco, CA",
        "New York, NY",
        "Los Angeles, CA",
        "Chicago, IL",
        "Seattle, WA",
        "Boston, MA",
        "Austin, TX",
        "Denver, CO",
    )
    PLACEHOLDER_IP = "xxx.xxx.xxx.xxx"

    def __init__(
        self,
        store: UrlRecordStore,
        clock: Optional[Clock] = None,
        short_code_strategy: Optional[ShortCodeStrategy] = None,
        base_url: str = "http://127.0.0.1:8000",
        default_validity_minutes: int = 30,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize the registry.

        Args:
            store: Record store holding every UrlRecord
            clock: Time source (system UTC clock by default)
            short_code_strategy: Generator for codes when none is requested
            base_url: Origin used to build the display short URL
            default_validity_minutes: Validity when a request gives none
            rng: Random source for simulated click locations
        """
        self.store = store
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.short_code_strategy = short_code_strategy or RandomShortCodeStrategy(rng=self.rng)
        self.base_url = base_url.rstrip("/")
        self.default_validity_minutes = default_validity_minutes

    @staticmethod
    def validate_url(url: str) -> bool:
        return validators.validate_url(url)

    @staticmethod
    def validate_short_code(code: str) -> bool:
        return validators.validate_short_code(code)

    def create_short_url(self, request: CreateUrlRequest) -> UrlRecord:
        """Create a new short URL

        Process:
        1. Validate the original URL
        2. Validate and reserve the custom code, or generate a free one
        3. Compute expiry from the clock
        4. Persist the record with no clicks

        The same original URL may be shortened any number of times.

        Raises:
            InvalidUrlError, InvalidShortCodeError, ShortCodeTakenError,
            PersistenceError
        """
        logger.info("Creating short URL", extra={"original_url": request.original_url})

        if not self.validate_url(request.original_url):
            logger.error(InvalidUrlError.message, extra={"url": request.original_url})
            raise InvalidUrlError()

        records = self._load_for_update()
        taken = {record.short_code for record in records}

        short_code = request.custom_short_code
        if short_code:
            if not self.validate_short_code(short_code):
                logger.error(InvalidShortCodeError.message, extra={"short_code": short_code})
                raise InvalidShortCodeError()

            # Expired records that were not purged still hold their code
            if short_code in taken:
                logger.error(ShortCodeTakenError.message, extra={"short_code": short_code})
                raise ShortCodeTakenError()
        else:
            short_code = self.short_code_strategy.generate(taken)

        validity_minutes = request.validity_minutes or self.default_validity_minutes
        now = self.clock.now()

        url = UrlRecord(
            id=str(uuid.uuid4()),
            original_url=request.original_url,
            short_code=short_code,
            short_url=f"{self.base_url}/{short_code}",
            created_at=now,
            expires_at=now + timedelta(minutes=validity_minutes),
            validity_minutes=validity_minutes,
            clicks=[],
        )

        records.append(url)
        self._save(records)

        logger.info(
            "Short URL created successfully",
            extra={"short_code": short_code, "original_url": request.original_url},
        )
        return url

    def create_multiple_urls(self, requests: Sequence[CreateUrlRequest]) -> List[UrlRecord]:
        """
        Create short URLs one after another.

        Each request is attempted even if an earlier one failed, and every
        success is persisted immediately. This is a partial commit, not a
        transaction.

        Raises:
            BatchCreateError: listing each failed item by 1-based position,
                with the already persisted records in `created`
        """
        created: List[UrlRecord] = []
        failures = []

        for position, request in enumerate(requests, start=1):
            try:
                created.append(self.create_short_url(request))
            except ShortenerError as e:
                failures.append((position, str(e)))

        if failures:
            error = BatchCreateError(failures, created)
            logger.warning(
                "Some URLs failed to process",
                extra={"errors": str(error).splitlines()},
            )
            raise error

        return created

    def get_all_urls(self) -> List[UrlRecord]:
        """
        Every record, with is_expired computed against the clock now.

        Never raises: an absent or unreadable store yields [].
        """
        try:
            records = self.store.load()
        except StorageReadError as e:
            logger.error("Failed to retrieve URLs from storage", extra={"error": str(e)})
            return []

        return self._mark_expiry(records)

    def get_url_by_short_code(self, short_code: str) -> Optional[UrlRecord]:
        """Exact match on short code, or None. Expired records are returned too."""
        for url in self.get_all_urls():
            if url.short_code == short_code:
                return url
        return None

    def is_short_code_taken(self, short_code: str) -> bool:
        return self.get_url_by_short_code(short_code) is not None

    def track_click(
        self,
        short_code: str,
        source: str = "direct",
        user_agent: str = "unknown"
    ) -> Optional[ClickRecord]:
        """
        Append a click to the record with this short code.

        Expiry is not checked here: callers that should refuse expired
        links (the redirect handler) check is_expired first.

        Returns:
            The new ClickRecord, or None if the code is unknown

        Raises:
            PersistenceError: the updated store could not be written
        """
        records = self._load_for_update()
        url = next((r for r in records if r.short_code == short_code), None)

        if url is None:
            logger.warning(
                "Attempted to track click for non-existent URL",
                extra={"short_code": short_code},
            )
            return None

        click = ClickRecord(
            id=str(uuid.uuid4()),
            timestamp=self.clock.now(),
            source=source or "direct",
            user_agent=user_agent,
            location=self._approximate_location(),
            ip_address=self.PLACEHOLDER_IP,
        )

        url.clicks.append(click)
        self._save(records)

        logger.info(
            "Click tracked",
            extra={"short_code": short_code, "source": click.source, "click_id": click.id},
        )
        return click

    def delete_url(self, url_id: str) -> None:
        """Remove the record with this id; unknown ids are a no-op"""
        records = self._load_for_update()
        remaining = [r for r in records if r.id != url_id]
        self._save(remaining)
        logger.info("URL deleted", extra={"id": url_id})

    def clear_expired_urls(self) -> int:
        """
        Purge every record whose expiry has passed as of now.

        Returns:
            Number of records removed
        """
        records = self._mark_expiry(self._load_for_update())
        valid = [r for r in records if not r.is_expired]
        removed = len(records) - len(valid)

        self._save(valid)
        logger.info("Expired URLs cleared", extra={"removed_count": removed})
        return removed

    def get_url_stats(self, short_code: str) -> Optional[UrlStats]:
        """Click analytics for one short URL, or None if unknown"""
        url = self.get_url_by_short_code(short_code)
        if not url:
            return None

        return UrlStats(
            short_code=url.short_code,
            original_url=url.original_url,
            total_clicks=len(url.clicks),
            is_expired=url.is_expired,
            created_at=url.created_at,
            expires_at=url.expires_at,
            last_clicked_at=url.clicks[-1].timestamp if url.clicks else None,
            clicks_by_source=dict(Counter(click.source for click in url.clicks)),
            clicks_by_location=dict(Counter(click.location for click in url.clicks)),
        )

    def get_summary(self) -> RegistrySummary:
        """Totals across the whole registry"""
        urls = self.get_all_urls()
        expired = sum(1 for url in urls if url.is_expired)

        return RegistrySummary(
            total_urls=len(urls),
            active_urls=len(urls) - expired,
            expired_urls=expired,
            total_clicks=sum(len(url.clicks) for url in urls),
        )

    def _mark_expiry(self, records: List[UrlRecord]) -> List[UrlRecord]:
        now = self.clock.now()
        for record in records:
            record.is_expired = now > record.expires_at
        return records

    def _load_for_update(self) -> List[UrlRecord]:
        try:
            return self.store.load()
        except StorageReadError as e:
            logger.error("Failed to retrieve URLs from storage", extra={"error": str(e)})
            raise PersistenceError() from e

    def _save(self, records: List[UrlRecord]) -> None:
        try:
            self.store.save(records)
        except PersistenceError as e:
            logger.error("Failed to save URLs to storage", extra={"error": repr(e.__cause__)})
            raise

    def _approximate_location(self) -> str:
        return self.rng.choice(self.LOCATIONS)
