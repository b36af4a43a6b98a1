# ABOUTME: Builds SearchHint values from loose title, identifier, and snippet inputs.
# ABOUTME: Used by the CLI and when re-seeding a lookup after titles were edited by hand.

from pdflibrarian.metadata.normalizer import (
    clean_text,
    normalize_doi,
    normalize_isbn,
    unique_preserving_order,
)
from pdflibrarian.metadata.types import SearchHint


def build_search_hint(
    file_name_title: str,
    extracted_title: str,
    *,
    snippet: str = "",
    isbn: str | None = None,
    doi: str | None = None,
) -> SearchHint:
    """Build a SearchHint with pre-ordered query candidates.

    Titles are cleaned, identifiers normalized (an identifier that normalizes
    to nothing becomes None). Query candidates hold the extracted title, the
    filename title, the DOI and then the ISBN in two spellings, deduplicated
    case-insensitively.
    """
    extracted = clean_text(extracted_title)
    file_title = clean_text(file_name_title)
    normalized_isbn = normalize_isbn(isbn) or None
    normalized_doi = normalize_doi(doi) or None

    candidates = [extracted, file_title]
    if normalized_doi:
        candidates.append(normalized_doi)
    if normalized_isbn:
        candidates.extend([f"isbn {normalized_isbn}", normalized_isbn])

    return SearchHint(
        file_name_title=file_title,
        extracted_title=extracted,
        snippet=clean_text(snippet),
        isbn=normalized_isbn,
        doi=normalized_doi,
        query_candidates=tuple(unique_preserving_order(candidates)),
    )
