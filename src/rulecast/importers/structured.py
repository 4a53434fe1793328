"""Template importer for markdown+frontmatter dialects.

Subclasses customise a handful of hooks (document splitting, field
validation, subtype detection, side-channel fields) while body segmentation,
the metadata section and taxonomy assignment stay in one place. The default
split reads YAML frontmatter; TOML and JSON dialects supply their own.
"""

from typing import Any

from rulecast.heuristics import DEFAULT_HEURISTICS, SectionHeuristics
from rulecast.importers.base import DialectImporter
from rulecast.importers.frontmatter import ParsedDocument, parse_frontmatter
from rulecast.importers.markdown import MarkdownSegmenter, PreambleParser, SegmentedDocument
from rulecast.models.canonical import (
    CanonicalPackage,
    MetadataSection,
    PackageDraft,
    Section,
    SourceMetadata,
    Subtype,
)
from rulecast.taxonomy import assign_taxonomy, detect_subtype_from_frontmatter


class StructuredImporter(DialectImporter):
    """Importer built on frontmatter parsing plus structural segmentation.

    Attributes:
        requires_frontmatter: Fail when the document has no frontmatter block
        consumes_description: Read the paragraph after the title as the
            description when the frontmatter does not provide one
    """

    requires_frontmatter: bool = False
    consumes_description: bool = True

    def __init__(self, heuristics: SectionHeuristics = DEFAULT_HEURISTICS) -> None:
        super().__init__(heuristics)
        self.segmenter = MarkdownSegmenter(heuristics)

    def import_document(self, text: str, source: SourceMetadata) -> CanonicalPackage:
        """Parse dialect text into a canonical package."""
        parsed = self.split_document(text)
        frontmatter = parsed.frontmatter
        self.validate_frontmatter(frontmatter, source)

        doc = self.segmenter.segment(
            parsed.body,
            consume_description=self.consumes_description and not frontmatter.get("description"),
            section_hints=source.section_hints,
            preamble_parser=self.preamble_parser(),
        )

        side_channel = self.side_channel(frontmatter, source)
        metadata = self.build_metadata(frontmatter, doc, source, side_channel)

        draft = PackageDraft.from_source(source)
        draft.description = metadata.description
        draft.sections = [metadata, *self.leading_sections(frontmatter), *doc.sections]
        if side_channel:
            draft.metadata[self.dialect] = side_channel

        self.resolve_tags(draft, source, text)
        if source.tags is None:
            draft.tags.update(self.extra_tags(frontmatter, source))

        subtype = self.resolve_subtype(source, self.detect_subtype(frontmatter))
        package = assign_taxonomy(draft, self.format, subtype)
        self.log_import(package)
        return package

    # =========================================================================
    # Hooks
    # =========================================================================

    def split_document(self, text: str) -> ParsedDocument:
        """Split the document into its field mapping and markdown body."""
        return parse_frontmatter(text, dialect=self.dialect, require=self.requires_frontmatter)

    def validate_frontmatter(self, frontmatter: dict[str, Any], source: SourceMetadata) -> None:
        """Raise a StructuralRequirementError if required fields are absent."""

    def preamble_parser(self) -> PreambleParser | None:
        """Return a hook that may claim the implicit leading section."""
        return None

    def leading_sections(self, frontmatter: dict[str, Any]) -> list[Section]:
        """Sections derived from frontmatter, placed right after metadata."""
        return []

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        """Dialect-specific fields kept only for round-tripping."""
        return {}

    def extra_tags(self, frontmatter: dict[str, Any], source: SourceMetadata) -> set[str]:
        """Dialect-specific tags added to inferred tags."""
        return set()

    def detect_subtype(self, frontmatter: dict[str, Any]) -> Subtype:
        """Detect the subtype from frontmatter markers."""
        return detect_subtype_from_frontmatter(frontmatter)

    def build_metadata(
        self,
        frontmatter: dict[str, Any],
        doc: SegmentedDocument,
        source: SourceMetadata,
        side_channel: dict[str, Any],
    ) -> MetadataSection:
        """Build the metadata section: H1 title wins over frontmatter name."""
        title = doc.title or frontmatter.get("name") or frontmatter.get("title") or source.name
        description = (
            frontmatter.get("description") or doc.description or source.description or ""
        )
        return MetadataSection(
            title=str(title),
            description=str(description).strip(),
            icon=doc.icon or frontmatter.get("icon"),
            version=source.version,
            author=source.author or None,
            dialect_data={self.dialect: dict(side_channel)} if side_channel else {},
        )
