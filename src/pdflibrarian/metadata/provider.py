# ABOUTME: MetadataSource protocol defining the contract for bibliographic sources.
# ABOUTME: Open Library, Google Books, Douban, and the Library of Congress all implement it.

from typing import Protocol, runtime_checkable

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.types import SearchHint


@runtime_checkable
class MetadataSource(Protocol):
    """Protocol for one external bibliographic source.

    fetch() issues a small bounded set of requests derived from the hint and
    returns raw candidates tagged with the source's label. Individual request
    failures are absorbed inside fetch(); it returns an empty list rather than
    raising for network or payload problems.
    """

    @property
    def name(self) -> str: ...

    async def fetch(self, hint: SearchHint) -> list[MetadataCandidate]: ...
