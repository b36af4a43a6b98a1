# ABOUTME: Unit tests for the text normalizer functions.
# ABOUTME: Covers identifiers, languages, years, comparison keys, and author cleanup.

import pytest

from pdflibrarian.metadata.normalizer import (
    clean_text,
    extract_isbn,
    first_year,
    infer_language,
    normalize_doi,
    normalize_for_compare,
    normalize_isbn,
    normalize_language,
    sanitize_authors,
    unique_preserving_order,
)


class TestCleanText:
    """Tests for clean_text."""

    def test_none_and_empty(self) -> None:
        assert clean_text(None) == ""
        assert clean_text("") == ""

    def test_collapses_whitespace(self) -> None:
        assert clean_text("  Clean \n\t Code  ") == "Clean Code"

    def test_unescapes_entities_and_strips_tags(self) -> None:
        assert clean_text("Tom &amp; Jerry <b>Adventures</b>") == "Tom & Jerry Adventures"

    def test_keeps_angle_bracket_title_text(self) -> None:
        assert (
            clean_text("Effective C++ <vector> and <map> in Practice")
            == "Effective C++ <vector> and <map> in Practice"
        )
        assert clean_text("<EM>C++</EM> <iostream> Basics") == "C++ <iostream> Basics"

    def test_removes_control_characters_and_nbsp(self) -> None:
        assert clean_text("Clean Code\x07!") == "Clean Code !"
        assert clean_text("Clean\u00a0Code") == "Clean Code"


class TestUniquePreservingOrder:
    """Tests for unique_preserving_order."""

    def test_case_insensitive_first_wins(self) -> None:
        assert unique_preserving_order(["Dune", "DUNE", " dune ", "Emma"]) == ["Dune", "Emma"]

    def test_drops_blank_entries(self) -> None:
        assert unique_preserving_order(["", "  ", "A"]) == ["A"]


class TestNormalizeIsbn:
    """Tests for normalize_isbn."""

    def test_strips_hyphens(self) -> None:
        assert normalize_isbn("978-0-13-235088-4") == "9780132350884"

    def test_uppercases_check_digit(self) -> None:
        assert normalize_isbn("0-8044-2957-x") == "080442957X"

    def test_none(self) -> None:
        assert normalize_isbn(None) == ""

    def test_idempotent(self) -> None:
        once = normalize_isbn("ISBN 0-8044-2957-x")
        assert normalize_isbn(once) == once


class TestNormalizeDoi:
    """Tests for normalize_doi."""

    @pytest.mark.parametrize(
        "raw",
        [
            "https://doi.org/10.1000/XYZ123",
            "http://dx.doi.org/10.1000/xyz123",
            "doi:10.1000/xyz123",
            "DOI: 10.1000/XYZ123",
            "  10.1000/xyz123  ",
        ],
    )
    def test_prefix_variants(self, raw: str) -> None:
        assert normalize_doi(raw) == "10.1000/xyz123"

    def test_none(self) -> None:
        assert normalize_doi(None) == ""

    def test_idempotent_with_stacked_prefixes(self) -> None:
        once = normalize_doi("doi:https://doi.org/10.1000/ABC")
        assert once == "10.1000/abc"
        assert normalize_doi(once) == once


class TestNormalizeLanguage:
    """Tests for normalize_language."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("eng", "en"),
            ("English", "en"),
            ("/languages/eng", "en"),
            ("chi", "zh"),
            ("zho", "zh"),
            ("Japanese", "ja"),
            ("fre", "fr"),
            ("deu", "de"),
            ("spa", "es"),
            ("en", "en"),
            ("Klingon", "klingon"),
            ("", ""),
        ],
    )
    def test_mapping(self, raw: str, expected: str) -> None:
        assert normalize_language(raw) == expected

    def test_idempotent(self) -> None:
        for raw in ("/languages/chi", "ENGLISH", "pt"):
            once = normalize_language(raw)
            assert normalize_language(once) == once


class TestNormalizeForCompare:
    """Tests for normalize_for_compare."""

    def test_strips_punctuation_and_spaces(self) -> None:
        assert normalize_for_compare("Clean Code: A Handbook!") == "cleancodeahandbook"

    def test_keeps_han_characters(self) -> None:
        assert normalize_for_compare("代码 整洁之道 (第2版)") == "代码整洁之道第2版"

    def test_drops_other_scripts(self) -> None:
        assert normalize_for_compare("Café") == "caf"


class TestFirstYear:
    """Tests for first_year."""

    def test_finds_year_in_date(self) -> None:
        assert first_year("2008-08-01") == "2008"

    def test_ignores_implausible_numbers(self) -> None:
        assert first_year("Vol. 1234, 2350 pages") == ""

    def test_picks_first_of_several(self) -> None:
        assert first_year("1949, reprinted 2003") == "1949"

    def test_none(self) -> None:
        assert first_year(None) == ""


class TestInferLanguage:
    """Tests for infer_language."""

    def test_han_wins(self) -> None:
        assert infer_language("Clean Code 代码整洁之道") == "zh"

    def test_latin(self) -> None:
        assert infer_language("Clean Code") == "en"

    def test_neither(self) -> None:
        assert infer_language("1984") == ""
        assert infer_language(None) == ""


class TestExtractIsbn:
    """Tests for extract_isbn."""

    def test_isbn13_in_text(self) -> None:
        assert extract_isbn("ISBN 9787115216878 (pbk.)") == "9787115216878"

    def test_isbn10_with_x(self) -> None:
        assert extract_isbn("isbn: 080442957x") == "080442957X"

    def test_no_isbn(self) -> None:
        assert extract_isbn("published 2010, 464 pages") == ""


class TestSanitizeAuthors:
    """Tests for sanitize_authors."""

    def test_splits_slash_delimited_entries(self) -> None:
        assert sanitize_authors(["Alice Smith / Bob Jones"]) == ["Alice Smith", "Bob Jones"]

    def test_drops_blank_long_and_duplicate_entries(self) -> None:
        blurb = "x" * 81
        result = sanitize_authors(["George Orwell", "", blurb, "george orwell", "  "])
        assert result == ["George Orwell"]

    def test_keeps_eighty_character_name(self) -> None:
        name = "y" * 80
        assert sanitize_authors([name]) == [name]

    def test_skips_non_strings(self) -> None:
        assert sanitize_authors(["Ann", None, 3]) == ["Ann"]  # type: ignore[list-item]
