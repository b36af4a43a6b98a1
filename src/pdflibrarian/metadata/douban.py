# ABOUTME: Douban book search source, scraped from the web search results page.
# ABOUTME: Pulls the embedded window.__DATA__ JSON out of the HTML and parses item abstracts.

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.config import BROWSER_USER_AGENT, DEFAULT_MAX_TITLE_QUERIES
from pdflibrarian.metadata.http import HttpClient, MetadataFetchError
from pdflibrarian.metadata.loose_json import dict_list, first_string
from pdflibrarian.metadata.normalizer import (
    clean_text,
    extract_isbn,
    first_year,
    infer_language,
    normalize_isbn,
    sanitize_authors,
)
from pdflibrarian.metadata.queries import QueryPlan, build_query_strings, hint_isbn
from pdflibrarian.metadata.types import PublicationKind, SearchHint

logger = logging.getLogger(__name__)

DOUBAN_LABEL = "Douban"

SEARCH_URL = "https://book.douban.com/subject_search"
_BOOK_CATEGORY = "1001"
_MAX_ITEMS = 10

ISBN_BASELINE = 58
TITLE_BASELINE = 42

_BROWSER_HEADERS = {
    "User-Agent": BROWSER_USER_AGENT,
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
}

_DATA_BLOCK_RE = re.compile(r"window\.__DATA__\s*=\s*(\{.*?\})\s*;", re.DOTALL)


@dataclass
class ParsedAbstract:
    """Fields recovered from a Douban "author / publisher / year / price" abstract."""

    authors: list[str] = field(default_factory=list)
    publisher: str = ""
    published_year: str = ""
    isbn: str = ""
    language: str = ""


def extract_data_payload(page: str) -> dict[str, Any] | None:
    """Decode the JSON object assigned to window.__DATA__ in a search page.

    The lazy match can stop at a "};" inside a string value, so when the first
    candidate block fails to decode the search widens to the next terminator.
    Returns None when no decodable object is present.
    """
    match = _DATA_BLOCK_RE.search(page)
    if match is None:
        return None

    start = match.start(1)
    end = match.end(1)
    while end <= len(page):
        try:
            payload = json.loads(page[start:end])
        except ValueError:
            next_end = page.find("};", end)
            if next_end == -1:
                return None
            end = next_end + 1
            continue
        except RecursionError:
            logger.debug("window.__DATA__ block is nested too deeply to decode")
            return None
        return payload if isinstance(payload, dict) else None
    return None


def _is_isbn_token(token: str) -> bool:
    return len(normalize_isbn(token)) in (10, 13) and bool(extract_isbn(token))


def parse_abstract(abstract: str) -> ParsedAbstract:
    """Split a slash-delimited abstract into authors, publisher, and year.

    The token right before the first year-like token is the publisher and
    everything ahead of it is authorship. Without a year, the second-to-last
    token is taken as the publisher. Two tokens read as author/publisher and
    a single token as a lone author. ISBN tokens are never read as years.
    """
    clean = clean_text(abstract)
    if not clean:
        return ParsedAbstract()

    tokens = [token for token in (clean_text(part) for part in clean.split("/")) if token]

    year_index = next(
        (
            index
            for index, token in enumerate(tokens)
            if first_year(token) and not _is_isbn_token(token)
        ),
        None,
    )

    authors: list[str] = []
    publisher = ""
    if year_index is not None and year_index > 0:
        publisher = tokens[year_index - 1]
        authors = tokens[: year_index - 1]
    elif len(tokens) >= 3:
        publisher = tokens[-2]
        authors = tokens[:-2]
    elif len(tokens) == 2:
        authors = [tokens[0]]
        publisher = tokens[1]
    elif len(tokens) == 1:
        authors = [tokens[0]]

    authors = sanitize_authors(authors)
    if publisher and publisher.lower() in {name.lower() for name in authors}:
        publisher = ""

    return ParsedAbstract(
        authors=authors,
        publisher=publisher,
        published_year=first_year(tokens[year_index]) if year_index is not None else "",
        isbn=extract_isbn(clean),
        language=infer_language(clean),
    )


def parse_search_page(page: str, baseline: int) -> list[MetadataCandidate]:
    """Parse a Douban subject_search HTML page into raw candidates."""
    payload = extract_data_payload(page)
    if payload is None:
        return []

    results: list[MetadataCandidate] = []
    for item in dict_list(payload.get("items"))[:_MAX_ITEMS]:
        title = first_string(item.get("title"))
        if not title:
            continue
        parsed = parse_abstract(first_string(item.get("abstract")))
        results.append(
            MetadataCandidate(
                kind=PublicationKind.BOOK,
                title=title,
                authors=parsed.authors,
                publisher=parsed.publisher,
                published_year=parsed.published_year,
                language=parsed.language,
                isbn=parsed.isbn,
                source=DOUBAN_LABEL,
                source_url=first_string(item.get("url")),
                validated_by=[DOUBAN_LABEL],
                confidence=baseline,
            )
        )
    return results


class DoubanSource:
    """Metadata source backed by Douban's book search page.

    Douban has no public search API; the results page embeds its data as a
    JavaScript assignment, which is what gets parsed. Strongest for Chinese
    titles, which the API-based sources cover poorly.
    """

    def __init__(
        self, http_client: HttpClient, *, max_title_queries: int = DEFAULT_MAX_TITLE_QUERIES
    ) -> None:
        self._http = http_client
        self._max_title_queries = max_title_queries

    @property
    def name(self) -> str:
        return DOUBAN_LABEL

    def plan_queries(self, hint: SearchHint) -> list[QueryPlan]:
        plans: list[QueryPlan] = []
        isbn = hint_isbn(hint)
        if isbn:
            plans.append(self._plan(isbn, ISBN_BASELINE))
        for query in build_query_strings(hint, self._max_title_queries):
            if isbn and query.upper() == isbn:
                continue
            plans.append(self._plan(query, TITLE_BASELINE))
        return plans

    @staticmethod
    def _plan(query: str, baseline: int) -> QueryPlan:
        return QueryPlan(
            params={"search_text": query, "cat": _BOOK_CATEGORY},
            baseline=baseline,
            label=f"search_text={query}",
        )

    async def fetch(self, hint: SearchHint) -> list[MetadataCandidate]:
        results: list[MetadataCandidate] = []
        for plan in self.plan_queries(hint):
            try:
                page = await self._http.get_text(
                    SEARCH_URL, params=plan.params, headers=_BROWSER_HEADERS
                )
            except MetadataFetchError as exc:
                logger.warning("Douban search failed for %s: %s", plan.label, exc)
                continue
            found = parse_search_page(page, plan.baseline)
            logger.debug("Douban %s returned %d candidate(s)", plan.label, len(found))
            results.extend(found)
        return results
