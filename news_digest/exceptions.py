class NewsDigestError(Exception):
    """Base class for errors surfaced by a digest run."""


class ConfigError(NewsDigestError):
    """Raised when a required setting is missing or malformed."""


class SourceFetchError(NewsDigestError):
    """Raised when a feed or page cannot be fetched or parsed."""


class ParseError(NewsDigestError):
    """Raised when a fetched record cannot be turned into a NewsItem."""


class NoItemsError(NewsDigestError):
    """Raised when no source produced a single relevant item."""


class TranslationError(NewsDigestError):
    """Raised when the translation provider rejects or fails a batch."""


class PublishError(NewsDigestError):
    """Raised when the webhook does not accept the digest."""

    def __init__(self, message: str, *, status_code=None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        # formatted text that failed to go out, set by NewsAggregator.run
        self.digest = None
