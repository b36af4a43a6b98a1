# ABOUTME: MetadataCandidate is one bibliographic record with provenance and confidence.
# ABOUTME: Sources emit raw candidates; the merge engine emits merged ones of the same shape.

from dataclasses import dataclass, field

from pdflibrarian.metadata.types import PublicationKind

SOURCE_SEPARATOR = " + "

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 99


@dataclass
class MetadataCandidate:
    """A candidate metadata match from one or more external sources.

    Raw candidates carry a single source label and the source's baseline
    confidence. After merging, source holds every contributing label joined
    with " + ", validated_by is the sorted union of corroborating sources and
    confidence is the final ranked score.
    """

    title: str
    kind: PublicationKind = PublicationKind.UNKNOWN
    subtitle: str = ""
    authors: list[str] = field(default_factory=list)
    publisher: str = ""
    published_year: str = ""
    language: str = ""
    isbn: str = ""
    doi: str = ""
    source: str = ""
    source_url: str = ""
    validated_by: list[str] = field(default_factory=list)
    confidence: int = 0

    def __post_init__(self) -> None:
        if not MIN_CONFIDENCE <= self.confidence <= MAX_CONFIDENCE:
            msg = (
                f"confidence must be between {MIN_CONFIDENCE} and {MAX_CONFIDENCE}, "
                f"got {self.confidence}"
            )
            raise ValueError(msg)

    @property
    def primary_title(self) -> str:
        """Title with the subtitle appended after a colon, when there is one."""
        if not self.subtitle:
            return self.title
        return f"{self.title}: {self.subtitle}"

    @property
    def authors_text(self) -> str:
        """Convenience property: joined author string for display."""
        return ", ".join(self.authors)

    @property
    def source_labels(self) -> list[str]:
        """Individual source labels, split back out of a merged source string."""
        return [part.strip() for part in self.source.split("+") if part.strip()]
