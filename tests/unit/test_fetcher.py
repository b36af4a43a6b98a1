# ABOUTME: Unit tests for MetadataFetcher and fetch_candidates.
# ABOUTME: Uses fake sources to check failure isolation, timeouts, and source selection.

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.config import FetchSettings
from pdflibrarian.metadata.douban import DoubanSource
from pdflibrarian.metadata.fetcher import MetadataFetcher, build_sources, fetch_candidates
from pdflibrarian.metadata.googlebooks import GoogleBooksSource
from pdflibrarian.metadata.http import HttpClient
from pdflibrarian.metadata.loc import LibraryOfCongressSource
from pdflibrarian.metadata.openlibrary import OpenLibrarySource
from pdflibrarian.metadata.types import SearchHint, SourceOptions
from tests.fixtures.fake_http import FakeHttpClient


class StaticSource:
    """Source that returns a fixed list after an optional delay."""

    def __init__(self, name: str, results: list[MetadataCandidate], delay: float = 0.0) -> None:
        self._name = name
        self._results = results
        self._delay = delay

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self, hint: SearchHint) -> list[MetadataCandidate]:
        if self._delay:
            await asyncio.sleep(self._delay)
        return list(self._results)


class ExplodingSource:
    """Source whose fetch raises an unexpected error."""

    @property
    def name(self) -> str:
        return "Exploding"

    async def fetch(self, hint: SearchHint) -> list[MetadataCandidate]:
        raise RuntimeError("parser blew up")


def _candidate(title: str, source: str, **overrides: object) -> MetadataCandidate:
    return MetadataCandidate(
        title=title, source=source, validated_by=[source], confidence=50, **overrides
    )


class TestBuildSources:
    """Tests for build_sources."""

    def test_all_sources_in_fixed_order(self) -> None:
        sources = build_sources(FakeHttpClient(), SourceOptions(), FetchSettings())
        assert [type(s) for s in sources] == [
            OpenLibrarySource,
            GoogleBooksSource,
            DoubanSource,
            LibraryOfCongressSource,
        ]

    def test_respects_options(self) -> None:
        options = SourceOptions(use_open_library=False, use_douban=False)
        sources = build_sources(FakeHttpClient(), options, FetchSettings())
        assert [s.name for s in sources] == ["Google Books", "Library of Congress"]

    def test_no_sources(self) -> None:
        assert build_sources(FakeHttpClient(), SourceOptions.none(), FetchSettings()) == []


class TestMetadataFetcher:
    """Tests for MetadataFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_failing_source_is_isolated(self, caplog: pytest.LogCaptureFixture) -> None:
        fetcher = MetadataFetcher(
            FakeHttpClient(),
            sources=[ExplodingSource(), StaticSource("Good", [_candidate("Dune", "Good")])],
        )
        with caplog.at_level(logging.WARNING, logger="pdflibrarian.metadata.fetcher"):
            results = await fetcher.fetch(SearchHint(extracted_title="Dune"))
        assert [c.title for c in results] == ["Dune"]
        assert "Exploding failed" in caplog.text
        assert "parser blew up" in caplog.text

    @pytest.mark.asyncio
    async def test_slow_source_is_cut_off(self, caplog: pytest.LogCaptureFixture) -> None:
        fetcher = MetadataFetcher(
            FakeHttpClient(),
            settings=FetchSettings(source_timeout=0.05),
            sources=[
                StaticSource("Slow", [_candidate("Slow Book", "Slow")], delay=5.0),
                StaticSource("Fast", [_candidate("Fast Book", "Fast")]),
            ],
        )
        with caplog.at_level(logging.WARNING, logger="pdflibrarian.metadata.fetcher"):
            results = await fetcher.fetch(SearchHint())
        assert [c.title for c in results] == ["Fast Book"]
        assert "Slow did not finish" in caplog.text

    @pytest.mark.asyncio
    async def test_result_independent_of_completion_order(self) -> None:
        """Which source answers first never changes the merged output."""
        first = _candidate("1984", "Open Library", authors=["George Orwell"], published_year="1949")
        second = _candidate("1984", "Google Books", authors=["George Orwell"], published_year="1949")
        hint = SearchHint(extracted_title="1984")

        fast_first = MetadataFetcher(
            FakeHttpClient(),
            sources=[StaticSource("A", [first]), StaticSource("B", [second], delay=0.02)],
        )
        slow_first = MetadataFetcher(
            FakeHttpClient(),
            sources=[StaticSource("A", [first], delay=0.02), StaticSource("B", [second])],
        )
        assert await fast_first.fetch(hint) == await slow_first.fetch(hint)

    @pytest.mark.asyncio
    async def test_no_sources_returns_empty(self) -> None:
        fetcher = MetadataFetcher(FakeHttpClient())
        assert await fetcher.fetch(SearchHint(extracted_title="Dune"), SourceOptions.none()) == []


class TestFetchCandidates:
    """Tests for the fetch_candidates entry point."""

    @pytest.mark.asyncio
    async def test_all_disabled_makes_no_requests(self) -> None:
        client = MagicMock(spec=HttpClient)
        results = await fetch_candidates(
            SearchHint(extracted_title="Dune"), SourceOptions.none(), http_client=client
        )
        assert results == []
        client.get_json.assert_not_called()
        client.get_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_uses_injected_client(self) -> None:
        client = FakeHttpClient()
        options = SourceOptions(
            use_open_library=True,
            use_google_books=False,
            use_douban=False,
            use_library_of_congress=False,
        )
        results = await fetch_candidates(
            SearchHint(extracted_title="Dune"), options, http_client=client
        )
        assert results == []
        assert client.urls == ["https://openlibrary.org/search.json"]
