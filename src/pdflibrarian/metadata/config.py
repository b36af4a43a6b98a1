# ABOUTME: Runtime settings for metadata fetches (timeouts, query limits, credentials).
# ABOUTME: FetchSettings is immutable and shared read-only by every source in a fetch.

from dataclasses import dataclass

DEFAULT_TIMEOUT = 20.0
DEFAULT_SOURCE_TIMEOUT = 90.0
DEFAULT_MAX_TITLE_QUERIES = 3
DEFAULT_USER_AGENT = "pdflibrarian/0.1.0"

# Douban serves its search page only to browser-looking clients.
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0 Safari/537.36"
)


@dataclass(frozen=True)
class FetchSettings:
    """Tunable knobs for one fetch.

    Attributes:
        timeout: Per-request timeout in seconds.
        source_timeout: Ceiling for one source's whole run (all of its queries).
        user_agent: User-Agent sent to API endpoints.
        max_title_queries: Cap on free-text queries per source (the ISBN query
            is extra).
        google_books_api_key: Optional key attached to Google Books requests.
    """

    timeout: float = DEFAULT_TIMEOUT
    source_timeout: float = DEFAULT_SOURCE_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    max_title_queries: int = DEFAULT_MAX_TITLE_QUERIES
    google_books_api_key: str | None = None
