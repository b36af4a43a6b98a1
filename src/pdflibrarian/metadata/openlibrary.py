# ABOUTME: Open Library metadata source implementation.
# ABOUTME: Searches openlibrary.org by ISBN and by title variants and returns raw candidates.

import logging

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.config import DEFAULT_MAX_TITLE_QUERIES
from pdflibrarian.metadata.http import HttpClient, MetadataFetchError
from pdflibrarian.metadata.openlibrary_parser import (
    OPEN_LIBRARY_LABEL,
    SEARCH_FIELDS,
    parse_search_results,
)
from pdflibrarian.metadata.queries import QueryPlan, build_query_strings, hint_isbn
from pdflibrarian.metadata.types import SearchHint

logger = logging.getLogger(__name__)

SEARCH_URL = "https://openlibrary.org/search.json"
_SEARCH_LIMIT = 8

ISBN_BASELINE = 64
TITLE_BASELINE = 55


class OpenLibrarySource:
    """Metadata source backed by the Open Library search API.

    ISBN search is the most precise query and goes first; the title variants
    from the hint follow. Uses dependency-injected HttpClient for testability.
    """

    def __init__(
        self, http_client: HttpClient, *, max_title_queries: int = DEFAULT_MAX_TITLE_QUERIES
    ) -> None:
        self._http = http_client
        self._max_title_queries = max_title_queries

    @property
    def name(self) -> str:
        return OPEN_LIBRARY_LABEL

    def plan_queries(self, hint: SearchHint) -> list[QueryPlan]:
        """ISBN query first (when the hint has one), then up to N title queries."""
        plans: list[QueryPlan] = []
        isbn = hint_isbn(hint)
        if isbn:
            plans.append(
                QueryPlan(
                    params={"isbn": isbn, "limit": str(_SEARCH_LIMIT), "fields": SEARCH_FIELDS},
                    baseline=ISBN_BASELINE,
                    label=f"isbn={isbn}",
                )
            )
        for query in build_query_strings(hint, self._max_title_queries):
            plans.append(
                QueryPlan(
                    params={"title": query, "limit": str(_SEARCH_LIMIT), "fields": SEARCH_FIELDS},
                    baseline=TITLE_BASELINE,
                    label=f"title={query}",
                )
            )
        return plans

    async def fetch(self, hint: SearchHint) -> list[MetadataCandidate]:
        """Run every planned query in order and pool the parsed docs."""
        results: list[MetadataCandidate] = []
        for plan in self.plan_queries(hint):
            try:
                data = await self._http.get_json(SEARCH_URL, params=plan.params)
            except MetadataFetchError as exc:
                logger.warning("Open Library search failed for %s: %s", plan.label, exc)
                continue
            found = parse_search_results(data, plan.baseline)
            logger.debug("Open Library %s returned %d candidate(s)", plan.label, len(found))
            results.extend(found)
        return results
