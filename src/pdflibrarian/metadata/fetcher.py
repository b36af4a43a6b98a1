# ABOUTME: Fetch orchestrator that fans a SearchHint out to every enabled metadata source.
# ABOUTME: Runs sources concurrently, isolates their failures, then merges and ranks the pool.

import asyncio
import logging

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.config import FetchSettings
from pdflibrarian.metadata.douban import DoubanSource
from pdflibrarian.metadata.googlebooks import GoogleBooksSource
from pdflibrarian.metadata.http import HttpClient, LibrarianHttpClient
from pdflibrarian.metadata.loc import LibraryOfCongressSource
from pdflibrarian.metadata.merge import merge_and_rank
from pdflibrarian.metadata.openlibrary import OpenLibrarySource
from pdflibrarian.metadata.provider import MetadataSource
from pdflibrarian.metadata.types import SearchHint, SourceOptions

logger = logging.getLogger(__name__)


def build_sources(
    http_client: HttpClient, options: SourceOptions, settings: FetchSettings
) -> list[MetadataSource]:
    """Instantiate the enabled sources in their fixed order."""
    sources: list[MetadataSource] = []
    if options.use_open_library:
        sources.append(
            OpenLibrarySource(http_client, max_title_queries=settings.max_title_queries)
        )
    if options.use_google_books:
        sources.append(
            GoogleBooksSource(
                http_client,
                api_key=settings.google_books_api_key,
                max_title_queries=settings.max_title_queries,
            )
        )
    if options.use_douban:
        sources.append(DoubanSource(http_client, max_title_queries=settings.max_title_queries))
    if options.use_library_of_congress:
        sources.append(
            LibraryOfCongressSource(http_client, max_title_queries=settings.max_title_queries)
        )
    return sources


class MetadataFetcher:
    """Queries several metadata sources at once and returns ranked candidates.

    Each source runs as its own task. A source that raises or outlives
    settings.source_timeout contributes nothing and is logged; the others
    still complete. Results are pooled in source order, so the outcome does
    not depend on which source answered first.
    """

    def __init__(
        self,
        http_client: HttpClient,
        settings: FetchSettings | None = None,
        sources: list[MetadataSource] | None = None,
    ) -> None:
        self._http = http_client
        self._settings = settings or FetchSettings()
        self._sources = sources

    @property
    def settings(self) -> FetchSettings:
        return self._settings

    def sources_for(self, options: SourceOptions) -> list[MetadataSource]:
        if self._sources is not None:
            return list(self._sources)
        return build_sources(self._http, options, self._settings)

    async def fetch(
        self, hint: SearchHint, options: SourceOptions | None = None
    ) -> list[MetadataCandidate]:
        """Run every enabled source for hint and merge what comes back."""
        sources = self.sources_for(options or SourceOptions())
        if not sources:
            logger.debug("No metadata sources enabled; skipping fetch")
            return []

        batches = await asyncio.gather(*(self._run_source(source, hint) for source in sources))

        pool: list[MetadataCandidate] = []
        for batch in batches:
            pool.extend(batch)

        ranked = merge_and_rank(pool, hint)
        logger.info(
            "Fetched %d raw candidate(s) from %d source(s), %d after merging",
            len(pool),
            len(sources),
            len(ranked),
        )
        return ranked

    async def _run_source(
        self, source: MetadataSource, hint: SearchHint
    ) -> list[MetadataCandidate]:
        try:
            found = await asyncio.wait_for(source.fetch(hint), self._settings.source_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "%s did not finish within %.1fs; ignoring its results",
                source.name,
                self._settings.source_timeout,
            )
            return []
        except Exception:
            logger.warning("%s failed; ignoring its results", source.name, exc_info=True)
            return []
        logger.debug("%s returned %d raw candidate(s)", source.name, len(found))
        return found


async def fetch_candidates(
    hint: SearchHint,
    options: SourceOptions | None = None,
    *,
    settings: FetchSettings | None = None,
    http_client: HttpClient | None = None,
) -> list[MetadataCandidate]:
    """Resolve ranked metadata candidates for a hint.

    When no http_client is given, a LibrarianHttpClient is opened for the
    call and closed afterwards. Nothing is opened when every source is
    disabled.
    """
    options = options or SourceOptions()
    settings = settings or FetchSettings()
    if not options.any_enabled:
        logger.debug("All metadata sources disabled")
        return []

    if http_client is not None:
        return await MetadataFetcher(http_client, settings).fetch(hint, options)

    async with LibrarianHttpClient(
        timeout=settings.timeout, user_agent=settings.user_agent
    ) as client:
        return await MetadataFetcher(client, settings).fetch(hint, options)
