"""Pass-through importer for unstructured markdown."""

from rulecast.importers.base import DialectImporter
from rulecast.models.canonical import (
    CanonicalPackage,
    InstructionsSection,
    MetadataSection,
    PackageDraft,
    PackageFormat,
    SourceMetadata,
    Subtype,
)
from rulecast.taxonomy import assign_taxonomy


class PassthroughImporter(DialectImporter):
    """Keep the whole document as a single instructions section.

    Used for plain markdown where substructure is not worth recovering; the
    trimmed text is kept verbatim.
    """

    format = PackageFormat.GENERIC

    def import_document(self, text: str, source: SourceMetadata) -> CanonicalPackage:
        """Wrap the trimmed text in one instructions section."""
        draft = PackageDraft.from_source(source)
        draft.sections = [
            MetadataSection(
                title=source.name,
                description=source.description or "",
                version=source.version,
                author=source.author or None,
            ),
            InstructionsSection(title="Instructions", content=text.strip()),
        ]
        self.resolve_tags(draft, source, text)

        package = assign_taxonomy(draft, self.format, self.resolve_subtype(source, Subtype.RULE))
        self.log_import(package)
        return package
