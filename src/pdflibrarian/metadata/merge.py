# ABOUTME: Identity resolution and merging of raw candidates from all sources.
# ABOUTME: Clusters by ISBN > DOI > title/author/year key and folds each cluster into one record.

import logging
from collections.abc import Iterable
from dataclasses import replace

from pdflibrarian.metadata.candidate import SOURCE_SEPARATOR, MetadataCandidate
from pdflibrarian.metadata.normalizer import (
    clean_text,
    first_year,
    infer_language,
    normalize_doi,
    normalize_for_compare,
    normalize_isbn,
    normalize_language,
    sanitize_authors,
    unique_preserving_order,
)
from pdflibrarian.metadata.scoring import (
    SCORE_CEILING,
    rank,
    score_candidate,
    source_bonus,
)
from pdflibrarian.metadata.types import PublicationKind, SearchHint

logger = logging.getLogger(__name__)


def normalize_candidate(candidate: MetadataCandidate) -> MetadataCandidate:
    """Return a copy of candidate with every field in canonical form."""
    return replace(
        candidate,
        title=clean_text(candidate.title),
        subtitle=clean_text(candidate.subtitle),
        authors=sanitize_authors(candidate.authors),
        publisher=clean_text(candidate.publisher),
        published_year=first_year(candidate.published_year),
        language=normalize_language(clean_text(candidate.language)),
        isbn=normalize_isbn(candidate.isbn),
        doi=normalize_doi(candidate.doi),
        source=clean_text(candidate.source),
        source_url=clean_text(candidate.source_url),
        validated_by=unique_preserving_order(candidate.validated_by),
    )


def dedupe_key(candidate: MetadataCandidate) -> str:
    """Identity key, trying ISBN, then DOI, then normalized title/author/year."""
    isbn = normalize_isbn(candidate.isbn)
    if isbn:
        return f"isbn:{isbn}"

    doi = normalize_doi(candidate.doi)
    if doi:
        return f"doi:{doi}"

    title = normalize_for_compare(candidate.title)
    author = normalize_for_compare(candidate.authors[0] if candidate.authors else "")
    year = first_year(candidate.published_year)
    return f"title:{title}|{author}|{year}"


def merge_kind(left: PublicationKind, right: PublicationKind) -> PublicationKind:
    """Combine two kinds: unknown yields to anything, book wins a disagreement."""
    if left == right:
        return left
    if left == PublicationKind.UNKNOWN:
        return right
    if right == PublicationKind.UNKNOWN:
        return left
    if PublicationKind.BOOK in (left, right):
        return PublicationKind.BOOK
    return PublicationKind.PAPER


def better_text(current: str, incoming: str) -> str:
    """Keep current unless incoming is non-empty and strictly longer."""
    if len(incoming) > len(current):
        return incoming
    return current


def fill_empty(current: str, incoming: str) -> str:
    """Keep current unless it is empty."""
    return current or incoming


def better_year(current: str, incoming: str) -> str:
    """Take incoming only when current has no valid year and incoming does."""
    if first_year(current):
        return current
    return first_year(incoming) or current


def merge_authors(left: list[str], right: list[str]) -> list[str]:
    """Order-preserving, case-insensitive union of two author lists."""
    return sanitize_authors([*left, *right])


def fold_into(base: MetadataCandidate, entry: MetadataCandidate) -> None:
    """Merge entry's fields into base without ever discarding a better value.

    MUTATES base. Provenance (source, validated_by, confidence) is handled by
    the caller.
    """
    base.kind = merge_kind(base.kind, entry.kind)
    base.title = better_text(base.title, entry.title)
    base.subtitle = better_text(base.subtitle, entry.subtitle)
    base.publisher = better_text(base.publisher, entry.publisher)
    base.authors = merge_authors(base.authors, entry.authors)
    base.published_year = better_year(base.published_year, entry.published_year)
    base.language = fill_empty(base.language, entry.language)
    base.isbn = fill_empty(base.isbn, entry.isbn)
    base.doi = fill_empty(base.doi, entry.doi)
    base.source_url = fill_empty(base.source_url, entry.source_url)


def merge_cluster(members: list[MetadataCandidate]) -> MetadataCandidate:
    """Fold a cluster of scored candidates into one merged candidate.

    The top-ranked member is the base. The final confidence is the strongest
    member score plus a corroboration bonus for each additional source.
    """
    ordered = rank(members)
    top = ordered[0]
    base = replace(top, authors=list(top.authors), validated_by=list(top.validated_by))

    sources: list[str] = []
    validations: set[str] = set()
    for entry in ordered:
        sources.extend(entry.source_labels)
        validations.update(entry.validated_by)
    for entry in ordered[1:]:
        fold_into(base, entry)

    if not base.language:
        base.language = infer_language(f"{base.title} {base.subtitle}")

    labels = unique_preserving_order(sources)
    base.source = SOURCE_SEPARATOR.join(labels)
    base.validated_by = sorted(validations)
    base.confidence = min(SCORE_CEILING, top.confidence + source_bonus(len(labels)))
    return base


class _ClusterIndex:
    """Union-find over dedupe-key groups.

    Groups are first formed by dedupe key. Groups whose members share an ISBN
    or DOI are then united, so that, for example, an ISBN-keyed group that
    carries DOI Y absorbs the doi:Y group. The lowest group index is always
    the root, which keeps cluster order stable.
    """

    def __init__(self, size: int) -> None:
        self._parent = list(range(size))

    def find(self, index: int) -> int:
        while self._parent[index] != index:
            self._parent[index] = self._parent[self._parent[index]]
            index = self._parent[index]
        return index

    def union(self, left: int, right: int) -> None:
        left_root, right_root = self.find(left), self.find(right)
        if left_root == right_root:
            return
        low, high = sorted((left_root, right_root))
        self._parent[high] = low


def cluster_candidates(candidates: Iterable[MetadataCandidate]) -> list[list[MetadataCandidate]]:
    """Group normalized candidates into identity clusters."""
    groups: dict[str, list[MetadataCandidate]] = {}
    for candidate in candidates:
        groups.setdefault(dedupe_key(candidate), []).append(candidate)

    members_by_group = list(groups.values())
    index = _ClusterIndex(len(members_by_group))
    owners: dict[str, int] = {}
    for group_index, members in enumerate(members_by_group):
        for member in members:
            identifiers = []
            if member.isbn:
                identifiers.append(f"isbn:{member.isbn}")
            if member.doi:
                identifiers.append(f"doi:{member.doi}")
            for identifier in identifiers:
                owner = owners.setdefault(identifier, group_index)
                index.union(owner, group_index)

    clusters: dict[int, list[MetadataCandidate]] = {}
    for group_index, members in enumerate(members_by_group):
        clusters.setdefault(index.find(group_index), []).extend(members)
    return list(clusters.values())


def merge_and_rank(
    pool: Iterable[MetadataCandidate], hint: SearchHint
) -> list[MetadataCandidate]:
    """Normalize, score, deduplicate, merge, and rank raw candidates.

    Candidates without a title are dropped. Returns one merged candidate per
    identity cluster, in ranking order.
    """
    scored: list[MetadataCandidate] = []
    dropped = 0
    for raw in pool:
        candidate = normalize_candidate(raw)
        if not candidate.title:
            dropped += 1
            continue
        candidate.confidence = score_candidate(candidate, hint)
        scored.append(candidate)

    if dropped:
        logger.debug("Dropped %d candidate(s) without a title", dropped)

    merged = [merge_cluster(members) for members in cluster_candidates(scored)]
    logger.debug("Merged %d candidate(s) into %d cluster(s)", len(scored), len(merged))
    return rank(merged)
