# ABOUTME: Confidence scoring and ranking order for metadata candidates.
# ABOUTME: Adds hint-match, identifier-match, and completeness bonuses to a source baseline.

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.normalizer import (
    normalize_doi,
    normalize_for_compare,
    normalize_isbn,
)
from pdflibrarian.metadata.types import SearchHint

# Score bounds for every scored candidate.
SCORE_FLOOR = 10
SCORE_CEILING = 99

# Title agreement with the hint; only the strongest applicable one counts.
_BONUS_EXTRACTED_TITLE = 18
_BONUS_FILE_NAME_TITLE = 12
_BONUS_SNIPPET_TITLE = 8
# Snippet containment only counts for titles longer than this (normalized).
_SNIPPET_MIN_TITLE_LENGTH = 5

# Identifier agreement with the hint.
_BONUS_ISBN_MATCH = 32
_BONUS_DOI_MATCH = 26

# Completeness bonuses.
_COMPLETENESS_FIELDS: dict[str, int] = {
    "authors": 4,
    "publisher": 3,
    "published_year": 3,
    "language": 2,
}

# Corroboration: each extra independent source adds this much, up to the cap.
_BONUS_PER_EXTRA_SOURCE = 3
_MAX_SOURCE_BONUS = 12


def _contains_either_way(a: str, b: str) -> bool:
    return a in b or b in a


def title_match_bonus(candidate: MetadataCandidate, hint: SearchHint) -> int:
    """Bonus for the candidate title agreeing with the hint's title signals.

    Extracted title beats filename title beats snippet; only the first test
    that matches is applied.
    """
    title = normalize_for_compare(candidate.primary_title)
    if not title:
        return 0

    extracted = normalize_for_compare(hint.extracted_title)
    if extracted and _contains_either_way(title, extracted):
        return _BONUS_EXTRACTED_TITLE

    file_title = normalize_for_compare(hint.file_name_title)
    if file_title and _contains_either_way(title, file_title):
        return _BONUS_FILE_NAME_TITLE

    snippet = normalize_for_compare(hint.snippet)
    if snippet and title in snippet and len(title) > _SNIPPET_MIN_TITLE_LENGTH:
        return _BONUS_SNIPPET_TITLE

    return 0


def identifier_match_bonus(candidate: MetadataCandidate, hint: SearchHint) -> int:
    """Bonus for ISBN and DOI agreement with the hint (both can apply)."""
    bonus = 0
    candidate_isbn = normalize_isbn(candidate.isbn)
    if candidate_isbn and candidate_isbn == normalize_isbn(hint.isbn):
        bonus += _BONUS_ISBN_MATCH
    candidate_doi = normalize_doi(candidate.doi)
    if candidate_doi and candidate_doi == normalize_doi(hint.doi):
        bonus += _BONUS_DOI_MATCH
    return bonus


def completeness_bonus(candidate: MetadataCandidate) -> int:
    """Small bonus for each populated descriptive field.

    Rewards richer records so they float above sparse stubs when the match
    signals are otherwise tied.
    """
    return sum(
        weight
        for field_name, weight in _COMPLETENESS_FIELDS.items()
        if getattr(candidate, field_name)
    )


def clamp_score(score: int) -> int:
    return max(SCORE_FLOOR, min(SCORE_CEILING, score))


def score_candidate(candidate: MetadataCandidate, hint: SearchHint) -> int:
    """Score a raw candidate against the hint, starting from its baseline.

    Returns an integer clamped to [SCORE_FLOOR, SCORE_CEILING].
    """
    score = candidate.confidence
    score += title_match_bonus(candidate, hint)
    score += identifier_match_bonus(candidate, hint)
    score += completeness_bonus(candidate)
    return clamp_score(score)


def source_bonus(source_count: int) -> int:
    """Corroboration bonus for a cluster backed by source_count distinct sources."""
    return min(_MAX_SOURCE_BONUS, _BONUS_PER_EXTRA_SOURCE * max(0, source_count - 1))


def rank_key(candidate: MetadataCandidate) -> tuple[int, str, str, str, str]:
    """Sort key: confidence descending, then primary title case-insensitively.

    Source label, source URL and raw title make the order total, so equal
    inputs always come out in the same order regardless of arrival order.
    """
    return (
        -candidate.confidence,
        candidate.primary_title.casefold(),
        candidate.source,
        candidate.source_url,
        candidate.primary_title,
    )


def rank(candidates: list[MetadataCandidate]) -> list[MetadataCandidate]:
    """Return candidates in ranking order (does not modify the input list)."""
    return sorted(candidates, key=rank_key)
