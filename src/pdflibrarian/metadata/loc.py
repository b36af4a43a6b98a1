# ABOUTME: Library of Congress catalog source using the loc.gov books JSON search.
# ABOUTME: Parses loosely structured result records, including "created_published" imprints.

import logging
import re
from typing import Any

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.config import DEFAULT_MAX_TITLE_QUERIES
from pdflibrarian.metadata.http import HttpClient, MetadataFetchError
from pdflibrarian.metadata.loose_json import (
    as_dict,
    dict_list,
    find_isbn,
    first_string,
    string_list,
)
from pdflibrarian.metadata.normalizer import (
    clean_text,
    first_year,
    normalize_language,
    sanitize_authors,
)
from pdflibrarian.metadata.queries import QueryPlan, build_query_strings, hint_isbn
from pdflibrarian.metadata.types import PublicationKind, SearchHint

logger = logging.getLogger(__name__)

LIBRARY_OF_CONGRESS_LABEL = "Library of Congress"

SEARCH_URL = "https://www.loc.gov/books/"
_MAX_RESULTS = 10

# Record members holding links and catalog numbers (LCCNs look like ISBN-10s).
_NON_ISBN_KEYS = frozenset(
    {"url", "id", "aka", "image_url", "resources", "related", "digitized", "lccn", "shelf_id"}
)

ISBN_BASELINE = 60
TITLE_BASELINE = 48

# "New York : Basic Books, 2011." -> "Basic Books"
_IMPRINT_PUBLISHER_RE = re.compile(
    r":\s*(.+?)(?:,|\.)\s*(?:1[5-9][0-9]{2}|20[0-9]{2}|21[0-9]{2})"
)


def parse_publisher_from_imprint(created_published: str) -> str:
    """Extract the publisher from a "Place : Publisher, Year" imprint string."""
    clean = clean_text(created_published)
    if not clean:
        return ""
    match = _IMPRINT_PUBLISHER_RE.search(clean)
    return clean_text(match.group(1)) if match else ""


def result_records(root: Any) -> list[dict[str, Any]]:
    """Locate the result list, which moves between content.results and results."""
    root = as_dict(root)
    content = as_dict(root.get("content"))
    if isinstance(content.get("results"), list):
        return dict_list(content["results"])
    return dict_list(root.get("results"))


def parse_record(raw: dict[str, Any], baseline: int) -> MetadataCandidate | None:
    """Turn one loc.gov result record into a raw candidate, or None without a title."""
    item = as_dict(raw.get("item"))
    title = first_string(raw.get("title")) or first_string(item.get("title"))
    if not title:
        return None

    authors = sanitize_authors(
        string_list(raw.get("contributor")) + string_list(item.get("contributors"))
    )

    imprints = string_list(item.get("created_published"))
    imprint = imprints[0] if imprints else ""

    year = first_year(first_string(raw.get("date"))) or first_year(imprint)

    languages = string_list(raw.get("language")) or string_list(item.get("language"))

    return MetadataCandidate(
        kind=PublicationKind.BOOK,
        title=title,
        authors=authors,
        publisher=parse_publisher_from_imprint(imprint),
        published_year=year,
        language=normalize_language(languages[0] if languages else ""),
        isbn=find_isbn(raw, _NON_ISBN_KEYS),
        source=LIBRARY_OF_CONGRESS_LABEL,
        source_url=first_string(raw.get("url")) or first_string(raw.get("id")),
        validated_by=[LIBRARY_OF_CONGRESS_LABEL],
        confidence=baseline,
    )


def parse_search_results(root: Any, baseline: int) -> list[MetadataCandidate]:
    results: list[MetadataCandidate] = []
    for raw in result_records(root)[:_MAX_RESULTS]:
        candidate = parse_record(raw, baseline)
        if candidate is not None:
            results.append(candidate)
    return results


class LibraryOfCongressSource:
    """Metadata source backed by the Library of Congress books search.

    The catalog is authoritative for English-language print editions, but its
    JSON records are loosely shaped: most fields can be a string, a list, or
    nested objects, so parsing goes through the loose_json accessors.
    """

    def __init__(
        self, http_client: HttpClient, *, max_title_queries: int = DEFAULT_MAX_TITLE_QUERIES
    ) -> None:
        self._http = http_client
        self._max_title_queries = max_title_queries

    @property
    def name(self) -> str:
        return LIBRARY_OF_CONGRESS_LABEL

    def plan_queries(self, hint: SearchHint) -> list[QueryPlan]:
        plans: list[QueryPlan] = []
        isbn = hint_isbn(hint)
        if isbn:
            plans.append(self._plan(f"isbn {isbn}", ISBN_BASELINE))
        for query in build_query_strings(hint, self._max_title_queries):
            plans.append(self._plan(query, TITLE_BASELINE))
        return plans

    @staticmethod
    def _plan(query: str, baseline: int) -> QueryPlan:
        return QueryPlan(params={"fo": "json", "q": query}, baseline=baseline, label=f"q={query}")

    async def fetch(self, hint: SearchHint) -> list[MetadataCandidate]:
        results: list[MetadataCandidate] = []
        for plan in self.plan_queries(hint):
            try:
                root = await self._http.get_json(SEARCH_URL, params=plan.params)
            except MetadataFetchError as exc:
                logger.warning("Library of Congress search failed for %s: %s", plan.label, exc)
                continue
            found = parse_search_results(root, plan.baseline)
            logger.debug(
                "Library of Congress %s returned %d candidate(s)", plan.label, len(found)
            )
            results.extend(found)
        return results
