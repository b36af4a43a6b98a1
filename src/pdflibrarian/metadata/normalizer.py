# ABOUTME: Pure text normalization for identifiers, languages, years, and author lists.
# ABOUTME: Turns messy source values into canonical forms that can be compared and displayed.

import html
import re
from collections.abc import Iterable

# Author entries longer than this are almost always blurbs, not names.
_MAX_AUTHOR_LENGTH = 80

_ISBN_STRIP_RE = re.compile(r"[^0-9X]")
_ISBN_FIND_RE = re.compile(r"(97[89][0-9]{10}|[0-9]{9}[0-9Xx])")
_DOI_PREFIX_RE = re.compile(
    r"^(?:\s*(?:https?://(?:dx\.)?doi\.org/|doi:))+\s*", re.IGNORECASE
)
_YEAR_RE = re.compile(r"(1[5-9][0-9]{2}|20[0-9]{2}|21[0-9]{2})")

# CJK Unified Ideographs, Extension A, compatibility block, and Extensions B-F.
_HAN_RANGES = "\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\U00020000-\U0002ebef"
_HAN_RE = re.compile(f"[{_HAN_RANGES}]")
_LATIN_RE = re.compile(r"[A-Za-z]")
_COMPARE_STRIP_RE = re.compile(f"[^a-z0-9{_HAN_RANGES}]")

# Inline markup sources embed in titles; other angle-bracket text is kept.
_TAG_RE = re.compile(
    r"</?(?:a|b|br|div|em|font|i|p|small|span|strong|sub|sup|u)\b[^>]*>", re.IGNORECASE
)
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")
_WHITESPACE_RE = re.compile(r"\s+")

_LANGUAGE_CODES: dict[str, str] = {
    "eng": "en",
    "english": "en",
    "fre": "fr",
    "fra": "fr",
    "spa": "es",
    "ger": "de",
    "deu": "de",
    "chi": "zh",
    "zho": "zh",
    "chinese": "zh",
    "jpn": "ja",
    "japanese": "ja",
}


def clean_text(value: str | None) -> str:
    """Make a source string display-ready.

    Unescapes HTML entities, drops inline HTML tags and control characters,
    turns non-breaking spaces into plain ones and collapses runs of whitespace.
    None becomes an empty string.
    """
    if not value:
        return ""
    text = html.unescape(value)
    text = _TAG_RE.sub(" ", text)
    text = text.replace("\u00a0", " ")
    text = _CONTROL_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def unique_preserving_order(values: Iterable[str]) -> list[str]:
    """Clean and deduplicate strings case-insensitively, keeping first-seen casing."""
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        clean = clean_text(value)
        if not clean:
            continue
        key = clean.lower()
        if key in seen:
            continue
        seen.add(key)
        ordered.append(clean)
    return ordered


def normalize_isbn(value: str | None) -> str:
    """Uppercase and keep only digits and X. Checksums are not validated."""
    if not value:
        return ""
    return _ISBN_STRIP_RE.sub("", value.upper())


def normalize_doi(value: str | None) -> str:
    """Strip doi.org / doi: prefixes and lowercase."""
    if not value:
        return ""
    return _DOI_PREFIX_RE.sub("", value.strip()).strip().lower()


def normalize_language(value: str | None) -> str:
    """Reduce a language value to an ISO 639-1 code where one is known.

    Open Library style taxonomy paths ("/languages/eng") are cut down to their
    last segment first. Unknown values pass through lowercased.
    """
    clean = (value or "").strip().lower()
    if not clean:
        return ""
    if "/languages/" in clean:
        clean = clean.rstrip("/").rsplit("/", 1)[-1].strip()
    return _LANGUAGE_CODES.get(clean, clean)


def normalize_for_compare(value: str | None) -> str:
    """Lowercase and keep only ASCII letters, digits, and Han characters.

    Only used for containment checks and dedupe keys, never displayed.
    """
    if not value:
        return ""
    return _COMPARE_STRIP_RE.sub("", value.lower())


def first_year(value: str | None) -> str:
    """Return the first plausible 4-digit year (1500-2199) in the text, or ""."""
    if not value:
        return ""
    match = _YEAR_RE.search(value)
    return match.group(1) if match else ""


def infer_language(text: str | None) -> str:
    """Guess zh for any Han text, en for any Latin letters, otherwise ""."""
    if not text:
        return ""
    if _HAN_RE.search(text):
        return "zh"
    if _LATIN_RE.search(text):
        return "en"
    return ""


def extract_isbn(text: str | None) -> str:
    """Find the first ISBN-13 (978/979) or ISBN-10 in free text, normalized."""
    if not text:
        return ""
    match = _ISBN_FIND_RE.search(text)
    return normalize_isbn(match.group(1)) if match else ""


def sanitize_authors(raw: Iterable[str]) -> list[str]:
    """Clean an author list.

    Entries like "Alice / Bob" are split apart, blank and implausibly long
    entries are dropped, and duplicates are removed case-insensitively.
    """
    cleaned: list[str] = []
    for entry in raw:
        if not isinstance(entry, str):
            continue
        text = clean_text(entry)
        if " / " in text:
            cleaned.extend(clean_text(part) for part in text.split("/"))
        else:
            cleaned.append(text)
    return unique_preserving_order(
        name for name in cleaned if name and len(name) <= _MAX_AUTHOR_LENGTH
    )
