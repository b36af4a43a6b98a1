# ABOUTME: Maps a resolved MetadataCandidate onto Dublin Core fields.
# ABOUTME: Produces the field/value pairs a PDF metadata writer embeds as XMP dc:* properties.

from collections.abc import Iterable
from enum import Enum

from pdflibrarian.metadata.candidate import MetadataCandidate
from pdflibrarian.metadata.normalizer import clean_text
from pdflibrarian.metadata.types import PublicationKind

PDF_FORMAT = "application/pdf"
TEXT_TYPE = "Text"
_DESCRIPTION_SEPARATOR = " | validation: "


class DublinCoreField(str, Enum):
    """Dublin Core elements a candidate can populate, keyed by XMP name."""

    TITLE = "dc:title"
    CREATOR = "dc:creator"
    PUBLISHER = "dc:publisher"
    DATE = "dc:date"
    LANGUAGE = "dc:language"
    TYPE = "dc:type"
    FORMAT = "dc:format"
    IDENTIFIER = "dc:identifier"
    SUBJECT = "dc:subject"
    SOURCE = "dc:source"
    RELATION = "dc:relation"
    DESCRIPTION = "dc:description"


# Fields written unless the caller picks its own set.
DEFAULT_FIELDS: tuple[DublinCoreField, ...] = (
    DublinCoreField.TITLE,
    DublinCoreField.CREATOR,
    DublinCoreField.PUBLISHER,
    DublinCoreField.DATE,
    DublinCoreField.LANGUAGE,
    DublinCoreField.TYPE,
    DublinCoreField.FORMAT,
    DublinCoreField.IDENTIFIER,
    DublinCoreField.SUBJECT,
)


def dublin_core_identifier(candidate: MetadataCandidate, file_name: str = "") -> str:
    """Best available identifier: ISBN, then DOI, then source URL, then file name."""
    if candidate.isbn:
        return f"isbn:{candidate.isbn}"
    if candidate.doi:
        return f"doi:{candidate.doi}"
    if candidate.source_url:
        return candidate.source_url
    return file_name


def dublin_core_values(
    candidate: MetadataCandidate, file_name: str = ""
) -> dict[DublinCoreField, str]:
    """Map every Dublin Core field to its value for this candidate.

    Args:
        candidate: The (usually merged) candidate to describe.
        file_name: Fallback identifier when the candidate has no ISBN, DOI,
            or source URL.

    Returns:
        A dict holding every DublinCoreField; values may be empty strings.
    """
    subject = "academic paper" if candidate.kind == PublicationKind.PAPER else "book"
    validation = ", ".join(candidate.validated_by)
    description = _DESCRIPTION_SEPARATOR.join(
        part for part in (candidate.subtitle, validation) if part.strip()
    )

    return {
        DublinCoreField.TITLE: candidate.title,
        DublinCoreField.CREATOR: candidate.authors_text,
        DublinCoreField.PUBLISHER: candidate.publisher,
        DublinCoreField.DATE: candidate.published_year,
        DublinCoreField.LANGUAGE: candidate.language,
        DublinCoreField.TYPE: TEXT_TYPE,
        DublinCoreField.FORMAT: PDF_FORMAT,
        DublinCoreField.IDENTIFIER: dublin_core_identifier(candidate, file_name),
        DublinCoreField.SUBJECT: subject,
        DublinCoreField.SOURCE: candidate.source,
        DublinCoreField.RELATION: candidate.source_url,
        DublinCoreField.DESCRIPTION: description,
    }


def dublin_core_entries(
    candidate: MetadataCandidate,
    fields: Iterable[DublinCoreField] = DEFAULT_FIELDS,
    file_name: str = "",
) -> list[tuple[DublinCoreField, str]]:
    """Selected fields with non-empty values, in DublinCoreField order."""
    selected = set(fields)
    values = dublin_core_values(candidate, file_name)
    entries: list[tuple[DublinCoreField, str]] = []
    for dc_field in DublinCoreField:
        if dc_field not in selected:
            continue
        value = clean_text(values[dc_field])
        if value:
            entries.append((dc_field, value))
    return entries
