# ABOUTME: Core input data structures for the metadata resolution pipeline.
# ABOUTME: SearchHint seeds a lookup; SourceOptions picks which sources to query.

from dataclasses import dataclass
from enum import Enum


class PublicationKind(str, Enum):
    """What sort of publication a candidate describes."""

    BOOK = "book"
    PAPER = "paper"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SearchHint:
    """Weak textual signal pulled out of a PDF, used to seed and score searches.

    Built by whoever scanned the document. Titles may be empty strings but are
    never None; isbn/doi are loosely detected and get re-normalized here.
    query_candidates is already ordered and deduplicated, title-like first.
    """

    file_name_title: str = ""
    extracted_title: str = ""
    snippet: str = ""
    isbn: str | None = None
    doi: str | None = None
    query_candidates: tuple[str, ...] = ()


@dataclass(frozen=True)
class SourceOptions:
    """Per-source switches for a single fetch."""

    use_open_library: bool = True
    use_google_books: bool = True
    use_douban: bool = True
    use_library_of_congress: bool = True

    @classmethod
    def none(cls) -> "SourceOptions":
        """Options with every source disabled."""
        return cls(
            use_open_library=False,
            use_google_books=False,
            use_douban=False,
            use_library_of_congress=False,
        )

    @property
    def any_enabled(self) -> bool:
        return (
            self.use_open_library
            or self.use_google_books
            or self.use_douban
            or self.use_library_of_congress
        )
