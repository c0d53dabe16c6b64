"""
Domain errors raised by the short link registry.

Every message is already human readable and is shown to the end user as-is.
Lookups that find nothing return None instead of raising.
"""

from typing import List, Optional, Tuple

from shortlink_app.schemas.url import UrlRecord


class ShortenerError(Exception):
    """Base class for all registry errors"""

    message = "Short link registry error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class InvalidUrlError(ShortenerError):
    message = "Invalid URL format"


class InvalidShortCodeError(ShortenerError):
    message = "Invalid shortcode format. Use 3-20 alphanumeric characters only."


class ShortCodeTakenError(ShortenerError):
    message = "Shortcode already exists. Please choose a different one."


class ShortCodeExhaustedError(ShortenerError):
    """Raised only when a retry cap is configured and every attempt collided"""

    def __init__(self, attempts: int):
        super().__init__(
            f"Could not generate unique short code after {attempts} attempts"
        )
        self.attempts = attempts


class PersistenceError(ShortenerError):
    """Writing the record store failed; the triggering operation is aborted"""

    message = "Failed to save URL data"


class StorageReadError(ShortenerError):
    """Stored blob is missing its backend or cannot be decoded"""

    message = "Failed to read URL data"


class BatchCreateError(ShortenerError):
    """
    One or more items of a batch failed.
    
    Items that succeeded are already persisted and listed in `created`.
    `failures` holds (1-based position, reason) pairs in input order.
    """

    def __init__(self, failures: List[Tuple[int, str]], created: Optional[List[UrlRecord]] = None):
        self.failures = failures
        self.created = created or []
        super().__init__(
            "\n".join(f"URL {position}: {reason}" for position, reason in failures)
        )
