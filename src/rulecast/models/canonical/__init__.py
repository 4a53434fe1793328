"""Canonical data model shared by every importer and exporter.

- CanonicalPackage: identity, taxonomy, tags, side-channel metadata, content
- Section variants: metadata, instructions, rules, examples, context,
  persona, tools, custom
- SourceMetadata / PackageDraft: importer inputs and working state
"""

from rulecast.models.canonical.package import (
    CanonicalContent,
    CanonicalPackage,
    PackageDraft,
    PackageFormat,
    SourceMetadata,
    Subtype,
    Taxonomy,
    parse_format,
    parse_subtype,
)
from rulecast.models.canonical.sections import (
    DEFAULT_TITLES,
    ContextSection,
    CustomSection,
    Example,
    ExamplesSection,
    InstructionsSection,
    MetadataSection,
    PersonaSection,
    Rule,
    RulesSection,
    Section,
    SectionKind,
    ToolsSection,
    section_from_dict,
    section_title,
)

__all__ = [
    # Package
    "CanonicalContent",
    "CanonicalPackage",
    "PackageDraft",
    "PackageFormat",
    "SourceMetadata",
    "Subtype",
    "Taxonomy",
    "parse_format",
    "parse_subtype",
    # Sections
    "DEFAULT_TITLES",
    "ContextSection",
    "CustomSection",
    "Example",
    "ExamplesSection",
    "InstructionsSection",
    "MetadataSection",
    "PersonaSection",
    "Rule",
    "RulesSection",
    "Section",
    "SectionKind",
    "ToolsSection",
    "section_from_dict",
    "section_title",
]
