# ABOUTME: Query planning shared by the metadata sources.
# ABOUTME: Derives capped, deduplicated search strings from a SearchHint.

from dataclasses import dataclass, field

from pdflibrarian.metadata.config import DEFAULT_MAX_TITLE_QUERIES
from pdflibrarian.metadata.normalizer import normalize_isbn, unique_preserving_order
from pdflibrarian.metadata.types import SearchHint


@dataclass(frozen=True)
class QueryPlan:
    """One outbound request a source intends to make.

    Attributes:
        params: Query-string parameters for the source endpoint.
        baseline: Confidence assigned to every candidate this request yields.
        label: Short description used in log messages.
    """

    params: dict[str, str] = field(default_factory=dict)
    baseline: int = 0
    label: str = ""


def build_query_strings(
    hint: SearchHint, max_queries: int = DEFAULT_MAX_TITLE_QUERIES
) -> list[str]:
    """Build up to max_queries free-text queries from a hint.

    The hint's own query candidates come first, then the extracted title and
    the filename title. Duplicates are dropped case-insensitively.
    """
    queries = [
        *hint.query_candidates,
        hint.extracted_title,
        hint.file_name_title,
    ]
    return unique_preserving_order(queries)[: max(0, max_queries)]


def hint_isbn(hint: SearchHint) -> str:
    """The hint's ISBN normalized, or "" when absent or unusable."""
    return normalize_isbn(hint.isbn)
