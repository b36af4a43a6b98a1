# ABOUTME: Google Books metadata source implementation.
# ABOUTME: Queries the volumes API by isbn: prefix and by title, parsing volumeInfo blocks.

import logging
from typing import Any

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.config import DEFAULT_MAX_TITLE_QUERIES
from pdflibrarian.metadata.http import HttpClient, MetadataFetchError
from pdflibrarian.metadata.loose_json import as_dict, dict_list, first_string, string_list
from pdflibrarian.metadata.normalizer import (
    first_year,
    normalize_isbn,
    normalize_language,
    sanitize_authors,
)
from pdflibrarian.metadata.queries import QueryPlan, build_query_strings, hint_isbn
from pdflibrarian.metadata.types import PublicationKind, SearchHint

logger = logging.getLogger(__name__)

GOOGLE_BOOKS_LABEL = "Google Books"

VOLUMES_URL = "https://www.googleapis.com/books/v1/volumes"
_MAX_RESULTS = 8

ISBN_BASELINE = 62
TITLE_BASELINE = 50


def best_isbn(identifiers: Any) -> str:
    """Pick ISBN_13 over ISBN_10 from a volumeInfo.industryIdentifiers list."""
    entries = dict_list(identifiers)
    for wanted in ("ISBN_13", "ISBN_10"):
        for entry in entries:
            if wanted in first_string(entry.get("type")).upper():
                isbn = normalize_isbn(first_string(entry.get("identifier")))
                if isbn:
                    return isbn
    return ""


def parse_volumes(data: Any, baseline: int) -> list[MetadataCandidate]:
    """Parse a volumes search response into raw candidates."""
    if not isinstance(data, dict):
        return []

    results: list[MetadataCandidate] = []
    for item in dict_list(data.get("items")):
        info = as_dict(item.get("volumeInfo"))
        title = first_string(info.get("title"))
        if not title:
            continue
        results.append(
            MetadataCandidate(
                kind=PublicationKind.BOOK,
                title=title,
                subtitle=first_string(info.get("subtitle")),
                authors=sanitize_authors(string_list(info.get("authors"))),
                publisher=first_string(info.get("publisher")),
                published_year=first_year(first_string(info.get("publishedDate"))),
                language=normalize_language(first_string(info.get("language"))),
                isbn=best_isbn(info.get("industryIdentifiers")),
                source=GOOGLE_BOOKS_LABEL,
                source_url=first_string(info.get("infoLink")),
                validated_by=[GOOGLE_BOOKS_LABEL],
                confidence=baseline,
            )
        )
    return results


class GoogleBooksSource:
    """Metadata source backed by the Google Books volumes API.

    An API key is optional; anonymous requests work but are rate limited
    more aggressively.
    """

    def __init__(
        self,
        http_client: HttpClient,
        *,
        api_key: str | None = None,
        max_title_queries: int = DEFAULT_MAX_TITLE_QUERIES,
    ) -> None:
        self._http = http_client
        self._api_key = api_key
        self._max_title_queries = max_title_queries

    @property
    def name(self) -> str:
        return GOOGLE_BOOKS_LABEL

    def plan_queries(self, hint: SearchHint) -> list[QueryPlan]:
        """An isbn:-prefixed query first, then the title variants."""
        plans: list[QueryPlan] = []
        isbn = hint_isbn(hint)
        if isbn:
            plans.append(self._plan(f"isbn:{isbn}", ISBN_BASELINE))
        for query in build_query_strings(hint, self._max_title_queries):
            plans.append(self._plan(query, TITLE_BASELINE))
        return plans

    def _plan(self, query: str, baseline: int) -> QueryPlan:
        params = {"q": query, "maxResults": str(_MAX_RESULTS), "printType": "books"}
        if self._api_key:
            params["key"] = self._api_key
        return QueryPlan(params=params, baseline=baseline, label=f"q={query}")

    async def fetch(self, hint: SearchHint) -> list[MetadataCandidate]:
        results: list[MetadataCandidate] = []
        for plan in self.plan_queries(hint):
            try:
                data = await self._http.get_json(VOLUMES_URL, params=plan.params)
            except MetadataFetchError as exc:
                logger.warning("Google Books search failed for %s: %s", plan.label, exc)
                continue
            found = parse_volumes(data, plan.baseline)
            logger.debug("Google Books %s returned %d candidate(s)", plan.label, len(found))
            results.extend(found)
        return results
