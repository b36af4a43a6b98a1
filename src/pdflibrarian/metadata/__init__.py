# ABOUTME: Metadata package for searching, merging, and ranking bibliographic candidates.
# ABOUTME: Exports the data model and the fetch_candidates entry point.

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.config import FetchSettings
from pdflibrarian.metadata.dublin_core import (
    DEFAULT_FIELDS,
    DublinCoreField,
    dublin_core_entries,
    dublin_core_values,
)
from pdflibrarian.metadata.fetcher import MetadataFetcher, fetch_candidates
from pdflibrarian.metadata.hints import build_search_hint
from pdflibrarian.metadata.http import MetadataFetchError
from pdflibrarian.metadata.merge import merge_and_rank
from pdflibrarian.metadata.provider import MetadataSource
from pdflibrarian.metadata.scoring import score_candidate
from pdflibrarian.metadata.types import PublicationKind, SearchHint, SourceOptions

__all__ = [
    "DEFAULT_FIELDS",
    "DublinCoreField",
    "FetchSettings",
    "MetadataCandidate",
    "MetadataFetchError",
    "MetadataFetcher",
    "MetadataSource",
    "PublicationKind",
    "SearchHint",
    "SourceOptions",
    "build_search_hint",
    "dublin_core_entries",
    "dublin_core_values",
    "fetch_candidates",
    "merge_and_rank",
    "score_candidate",
]
