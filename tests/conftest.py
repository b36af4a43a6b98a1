# ABOUTME: Shared pytest fixtures for pdflibrarian tests.
# ABOUTME: Provides common hints and a candidate factory for scoring and merge tests.

from collections.abc import Callable
from typing import Any

import pytest

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.types import PublicationKind, SearchHint


@pytest.fixture
def clean_code_hint() -> SearchHint:
    """Hint for a PDF of Clean Code with its ISBN printed on the copyright page."""
    return SearchHint(
        file_name_title="clean code",
        extracted_title="Clean Code",
        isbn="9780132350884",
    )


@pytest.fixture
def empty_hint() -> SearchHint:
    """Hint carrying no usable signal at all."""
    return SearchHint()


@pytest.fixture
def make_candidate() -> Callable[..., MetadataCandidate]:
    """Factory for raw book candidates with sensible defaults."""

    def _make(title: str = "Some Title", **overrides: Any) -> MetadataCandidate:
        fields: dict[str, Any] = {
            "kind": PublicationKind.BOOK,
            "source": "Open Library",
            "validated_by": ["Open Library"],
            "confidence": 50,
        }
        fields.update(overrides)
        return MetadataCandidate(title=title, **fields)

    return _make
