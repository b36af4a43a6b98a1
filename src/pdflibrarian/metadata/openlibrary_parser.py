# ABOUTME: Parsing functions for Open Library search API JSON responses.
# ABOUTME: Converts OL search docs into raw MetadataCandidate instances.

from typing import Any

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.loose_json import dict_list, first_string, string_list
from pdflibrarian.metadata.normalizer import (
    clean_text,
    first_year,
    normalize_isbn,
    normalize_language,
    sanitize_authors,
)
from pdflibrarian.metadata.types import PublicationKind

OPEN_LIBRARY_LABEL = "Open Library"

_OL_BASE = "https://openlibrary.org"

# Fields requested from search.json; keeps the payload small.
SEARCH_FIELDS = ",".join(
    [
        "title",
        "subtitle",
        "author_name",
        "first_publish_year",
        "publisher",
        "isbn",
        "language",
        "key",
    ]
)


def parse_search_results(data: Any, baseline: int) -> list[MetadataCandidate]:
    """Parse an Open Library Search API response into raw candidates.

    Each doc carries title, author_name, isbn, publisher, etc. Docs without a
    usable title are skipped; any other missing field is left empty.
    """
    if not isinstance(data, dict):
        return []

    results: list[MetadataCandidate] = []
    for doc in dict_list(data.get("docs")):
        candidate = _parse_doc(doc, baseline)
        if candidate is not None:
            results.append(candidate)
    return results


def _parse_doc(doc: dict[str, Any], baseline: int) -> MetadataCandidate | None:
    title = first_string(doc.get("title"))
    if not title:
        return None

    key = first_string(doc.get("key"))
    source_url = f"{_OL_BASE}{key}" if key.startswith("/") else ""

    return MetadataCandidate(
        kind=PublicationKind.BOOK,
        title=title,
        subtitle=first_string(doc.get("subtitle")),
        authors=sanitize_authors(string_list(doc.get("author_name"))),
        publisher=clean_text(first_string(doc.get("publisher"))),
        published_year=first_year(first_string(doc.get("first_publish_year"))),
        language=normalize_language(first_string(doc.get("language"))),
        isbn=normalize_isbn(first_string(doc.get("isbn"))),
        source=OPEN_LIBRARY_LABEL,
        source_url=source_url,
        validated_by=[OPEN_LIBRARY_LABEL],
        confidence=baseline,
    )
