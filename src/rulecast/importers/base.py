"""Abstract base class for dialect importers.

Each importer turns one dialect's text into a CanonicalPackage:
1. Split and validate frontmatter (fail fast on missing required structure)
2. Segment the markdown body into typed canonical sections
3. Record dialect-specific fields as side-channel metadata
4. Assign the taxonomy as the final step
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from rulecast.heuristics import DEFAULT_HEURISTICS, SectionHeuristics
from rulecast.importers.inference import infer_tags
from rulecast.models.canonical import (
    CanonicalPackage,
    PackageDraft,
    PackageFormat,
    SourceMetadata,
    Subtype,
    parse_subtype,
)

logger = logging.getLogger(__name__)


class FormatError(Exception):
    """Raised when a document does not follow its dialect's format."""

    def __init__(self, dialect: str, message: str) -> None:
        self.dialect = dialect
        self.message = message
        super().__init__(message)


class StructuralRequirementError(FormatError):
    """Raised when structure the dialect mandates is absent or invalid.

    Attributes:
        dialect: Dialect being imported
        field: Name of the offending field, if any
    """

    def __init__(self, dialect: str, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(dialect, message)


class MissingFrontmatterError(StructuralRequirementError):
    """Raised when a dialect requires a frontmatter block and none exists."""

    def __init__(self, dialect: str, message: str | None = None) -> None:
        super().__init__(
            dialect,
            message or f"{dialect} files require YAML frontmatter delimited by ---",
        )


class MissingFieldError(StructuralRequirementError):
    """Raised when a required frontmatter field is absent."""

    def __init__(self, dialect: str, field: str, message: str | None = None) -> None:
        super().__init__(
            dialect,
            message or f"{dialect} frontmatter requires the '{field}' field",
            field=field,
        )


class InvalidFieldError(StructuralRequirementError):
    """Raised when a frontmatter field has a value outside its allowed set."""

    def __init__(self, dialect: str, field: str, value: Any, allowed: tuple[str, ...]) -> None:
        self.value = value
        self.allowed = allowed
        super().__init__(
            dialect,
            f"Invalid {field} '{value}' in {dialect} frontmatter. Valid: {', '.join(allowed)}",
            field=field,
        )


class MalformedFrontmatterError(StructuralRequirementError):
    """Raised when a frontmatter block cannot be read as key/value pairs."""

    def __init__(self, dialect: str, detail: str) -> None:
        super().__init__(dialect, f"Malformed frontmatter in {dialect} document: {detail}")


class MalformedDocumentError(StructuralRequirementError):
    """Raised when a document is not valid in its dialect's file syntax (TOML, JSON)."""

    def __init__(self, dialect: str, detail: str) -> None:
        super().__init__(dialect, f"Malformed {dialect} document: {detail}")


class DialectImporter(ABC):
    """Abstract interface for dialect importers.

    Attributes:
        dialect: Dialect name (PackageFormat value)
        heuristics: Section inference tables
    """

    format: PackageFormat = PackageFormat.GENERIC

    def __init__(self, heuristics: SectionHeuristics = DEFAULT_HEURISTICS) -> None:
        """Initialize the importer.

        Args:
            heuristics: Keyword tables used for section inference
        """
        self.heuristics = heuristics

    @property
    def dialect(self) -> str:
        return self.format.value

    @abstractmethod
    def import_document(self, text: str, source: SourceMetadata) -> CanonicalPackage:
        """Parse dialect text into a canonical package.

        Args:
            text: Full document text
            source: Caller-supplied identity for the document

        Returns:
            CanonicalPackage

        Raises:
            StructuralRequirementError: If dialect-mandated structure is absent
        """

    # =========================================================================
    # Shared helpers
    # =========================================================================

    def resolve_subtype(self, source: SourceMetadata, detected: Subtype) -> Subtype:
        """An explicit subtype on the source overrides the detected one."""
        if source.subtype:
            return parse_subtype(source.subtype)
        return detected

    def resolve_tags(self, draft: PackageDraft, source: SourceMetadata, text: str) -> None:
        """Use source tags when given, else the dialect name plus inferred tags."""
        if source.tags is not None:
            draft.tags = set(source.tags)
            return
        vocabulary = self.heuristics.tag_vocabulary
        draft.tags |= {self.dialect, *infer_tags(text, vocabulary, self.heuristics.max_tags)}

    def log_import(self, package: CanonicalPackage) -> None:
        logger.debug(
            "Imported %s as %s/%s with %d sections",
            package.id,
            package.format.value,
            package.subtype.value,
            len(package.sections),
        )
