"""Canonical package: the single intermediate representation.

Every dialect importer produces a ``CanonicalPackage`` and every exporter
consumes one. Packages are immutable once built; importers accumulate state
in a ``PackageDraft`` and hand it to ``assign_taxonomy`` as their final step.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from rulecast.models.canonical.sections import (
    MetadataSection,
    Section,
    SectionKind,
    section_from_dict,
)

SEMVER_PATTERN = re.compile(
    r"^\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?(?:\+[0-9A-Za-z.-]+)?$"
)


class PackageFormat(Enum):
    """Source dialect of a package."""

    CURSOR = "cursor"
    CLAUDE = "claude"
    COPILOT = "copilot"
    KIRO = "kiro"
    WINDSURF = "windsurf"
    AGENTS_MD = "agents.md"
    TRAE = "trae"
    DROID = "droid"
    AIDER = "aider"
    GEMINI = "gemini"
    CONTINUE = "continue"
    RULER = "ruler"
    ZENCODER = "zencoder"
    KIRO_AGENT = "kiro-agent"
    GENERIC = "generic"


class Subtype(Enum):
    """Functional role of a package within its dialect."""

    RULE = "rule"
    AGENT = "agent"
    SKILL = "skill"
    SLASH_COMMAND = "slash-command"
    PROMPT = "prompt"
    WORKFLOW = "workflow"
    TOOL = "tool"
    TEMPLATE = "template"
    COLLECTION = "collection"
    CHATMODE = "chatmode"
    HOOK = "hook"


def parse_format(value: "PackageFormat | str") -> PackageFormat:
    """Coerce a string to a PackageFormat.

    Raises:
        ValueError: If the value is not a known format
    """
    if isinstance(value, PackageFormat):
        return value
    try:
        return PackageFormat(value)
    except ValueError:
        valid = [f.value for f in PackageFormat]
        raise ValueError(f"Unknown format: {value!r}. Valid: {valid}") from None


def parse_subtype(value: "Subtype | str") -> Subtype:
    """Coerce a string to a Subtype.

    Raises:
        ValueError: If the value is not a known subtype
    """
    if isinstance(value, Subtype):
        return value
    try:
        return Subtype(value)
    except ValueError:
        valid = [s.value for s in Subtype]
        raise ValueError(f"Unknown subtype: {value!r}. Valid: {valid}") from None


@dataclass(frozen=True)
class Taxonomy:
    """The (format, subtype) classification pair, always set together."""

    format: PackageFormat
    subtype: Subtype

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for serialization."""
        return {"format": self.format.value, "subtype": self.subtype.value}


@dataclass(frozen=True)
class CanonicalContent:
    """Ordered section list plus the canonical schema marker.

    Attributes:
        sections: Sections in document order
        format: Always "canonical"
        version: Canonical schema version
    """

    sections: tuple[Section, ...] = ()
    format: str = "canonical"
    version: str = "1.0"

    def __post_init__(self) -> None:
        object.__setattr__(self, "sections", tuple(self.sections))
        metadata_count = sum(1 for s in self.sections if s.kind is SectionKind.METADATA)
        if metadata_count > 1:
            raise ValueError(
                f"Canonical content allows at most one metadata section (got {metadata_count})"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "format": self.format,
            "version": self.version,
            "sections": [section.to_dict() for section in self.sections],
        }


@dataclass(frozen=True)
class SourceMetadata:
    """Caller-supplied identity for a document being imported.

    Attributes:
        id: Package identifier
        name: Package name (also used for Kiro domain inference)
        version: Semantic version string
        author: Package author
        tags: Explicit tags; when None, importers infer them
        description: Fallback description when the document has none
        subtype: Explicit subtype override (e.g. derived from a file path)
        section_hints: Heading text (case-insensitive) to section kind
    """

    id: str
    name: str
    version: str = "1.0.0"
    author: str = ""
    tags: tuple[str, ...] | None = None
    description: str | None = None
    subtype: str | None = None
    section_hints: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Source id must not be empty")
        if not self.name or not self.name.strip():
            raise ValueError("Source name must not be empty")
        if not SEMVER_PATTERN.match(self.version):
            raise ValueError(f"Invalid semantic version: {self.version!r}")
        if self.tags is not None:
            object.__setattr__(self, "tags", tuple(self.tags))
        if self.subtype is not None:
            parse_subtype(self.subtype)
        hints = {}
        for heading, kind in self.section_hints.items():
            hints[heading.strip().lower()] = SectionKind(kind).value
        object.__setattr__(self, "section_hints", hints)


@dataclass
class PackageDraft:
    """Mutable package under construction by an importer."""

    id: str
    name: str
    version: str = "1.0.0"
    author: str = ""
    description: str = ""
    tags: set[str] = field(default_factory=set)
    sections: list[Section] = field(default_factory=list)
    metadata: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_source(cls, source: SourceMetadata) -> "PackageDraft":
        """Start a draft from caller-supplied source metadata."""
        return cls(
            id=source.id,
            name=source.name,
            version=source.version,
            author=source.author,
            description=source.description or "",
            tags=set(source.tags or ()),
        )

    def has_content_section(self) -> bool:
        """Return True if any section other than metadata is present."""
        return any(s.kind is not SectionKind.METADATA for s in self.sections)


@dataclass(frozen=True)
class CanonicalPackage:
    """Dialect-independent representation of one rule/agent/skill document.

    Attributes:
        id: Package identifier
        name: Package name
        version: Semantic version
        author: Package author
        description: One-line description
        tags: Unordered tag set
        taxonomy: (format, subtype) classification
        content: Canonical content with ordered sections
        metadata: Dialect name to side-channel fields for round-tripping
    """

    id: str
    name: str
    version: str
    author: str
    description: str
    tags: frozenset[str]
    taxonomy: Taxonomy
    content: CanonicalContent
    metadata: Mapping[str, Mapping[str, Any]] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", frozenset(self.tags))
        if not SEMVER_PATTERN.match(self.version):
            raise ValueError(f"Invalid semantic version: {self.version!r}")

    @property
    def format(self) -> PackageFormat:
        return self.taxonomy.format

    @property
    def subtype(self) -> Subtype:
        return self.taxonomy.subtype

    @property
    def sections(self) -> tuple[Section, ...]:
        return self.content.sections

    @property
    def metadata_section(self) -> MetadataSection | None:
        """Return the metadata section if present."""
        for section in self.sections:
            if isinstance(section, MetadataSection):
                return section
        return None

    @property
    def title(self) -> str:
        """Display title: the metadata title, else the package name."""
        meta = self.metadata_section
        if meta is not None and meta.title:
            return meta.title
        return self.name

    @property
    def display_description(self) -> str:
        """Description from the metadata section, else the package field."""
        meta = self.metadata_section
        if meta is not None and meta.description:
            return meta.description
        return self.description

    def find_section(self, kind: SectionKind) -> Section | None:
        """Return the first section of the given kind."""
        for section in self.sections:
            if section.kind is kind:
                return section
        return None

    def sections_of(self, kind: SectionKind) -> list[Section]:
        """Return all sections of the given kind in document order."""
        return [s for s in self.sections if s.kind is kind]

    def dialect_data(self, dialect: str) -> dict[str, Any]:
        """Return side-channel fields stored for a dialect (empty if none)."""
        return dict(self.metadata.get(dialect, {}))

    def with_metadata(self, dialect: str, data: Mapping[str, Any]) -> "CanonicalPackage":
        """Return a copy enriched with side-channel fields for a dialect.

        Existing keys for the dialect are kept unless ``data`` overrides them.
        """
        merged = {key: dict(value) for key, value in self.metadata.items()}
        merged.setdefault(dialect, {}).update(data)
        return replace(self, metadata=merged)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the canonical JSON storage form."""
        return {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "author": self.author,
            "description": self.description,
            "tags": sorted(self.tags),
            "format": self.format.value,
            "subtype": self.subtype.value,
            "content": self.content.to_dict(),
            "metadata": {key: dict(value) for key, value in self.metadata.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CanonicalPackage":
        """Read a package back from its canonical JSON storage form.

        Raises:
            ValueError: If required fields are missing or invalid
        """
        missing = [key for key in ("id", "name", "format", "subtype") if not data.get(key)]
        if missing:
            raise ValueError(f"Canonical package missing fields: {', '.join(missing)}")

        content = data.get("content") or {}
        sections: Iterable[Mapping[str, Any]] = content.get("sections", ())
        return cls(
            id=data["id"],
            name=data["name"],
            version=data.get("version", "1.0.0"),
            author=data.get("author", ""),
            description=data.get("description", ""),
            tags=frozenset(data.get("tags", ())),
            taxonomy=Taxonomy(parse_format(data["format"]), parse_subtype(data["subtype"])),
            content=CanonicalContent(
                sections=tuple(section_from_dict(s) for s in sections),
                format=content.get("format", "canonical"),
                version=content.get("version", "1.0"),
            ),
            metadata={key: dict(value) for key, value in (data.get("metadata") or {}).items()},
        )
