"""Kiro steering file importer.

Kiro steering files must start with frontmatter declaring an ``inclusion``
mode; ``fileMatch`` mode also needs a ``fileMatchPattern``. Missing or
invalid values fail the import instead of defaulting.
"""

import re
from typing import Any

from rulecast.importers.base import InvalidFieldError, MissingFieldError
from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, SourceMetadata, Subtype
from rulecast.models.conversion import INCLUSION_MODES, InclusionMode

FOUNDATIONAL_TYPES = ("product", "tech", "structure")
PATTERN_SEGMENT = re.compile(r"/([^/*]+)/")


def infer_domain(name: str) -> str:
    """Derive a steering domain from a file or package name."""
    return re.sub(r"\.md$", "", name).replace("-", " ").strip()


def foundational_type(name: str) -> str | None:
    """Return product, tech or structure for Kiro's foundational files."""
    normalized = re.sub(r"\.md$", "", name.lower())
    return normalized if normalized in FOUNDATIONAL_TYPES else None


class KiroImporter(StructuredImporter):
    """Import Kiro steering files, failing fast on missing structure."""

    format = PackageFormat.KIRO
    requires_frontmatter = True

    def validate_frontmatter(self, frontmatter: dict[str, Any], source: SourceMetadata) -> None:
        inclusion = frontmatter.get("inclusion")
        if not inclusion:
            raise MissingFieldError(
                self.dialect,
                "inclusion",
                "Kiro steering files require an 'inclusion' field in frontmatter",
            )
        if inclusion not in INCLUSION_MODES:
            raise InvalidFieldError(self.dialect, "inclusion", inclusion, INCLUSION_MODES)
        if inclusion == InclusionMode.FILE_MATCH.value and not frontmatter.get("fileMatchPattern"):
            raise MissingFieldError(
                self.dialect,
                "fileMatchPattern",
                "fileMatch inclusion mode requires a 'fileMatchPattern' field",
            )

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        data: dict[str, Any] = {"inclusion": frontmatter["inclusion"]}
        if frontmatter.get("fileMatchPattern"):
            data["fileMatchPattern"] = str(frontmatter["fileMatchPattern"])
        data["domain"] = str(frontmatter.get("domain") or infer_domain(source.name))
        found = foundational_type(source.name)
        if found:
            data["foundationalType"] = found
        return data

    def extra_tags(self, frontmatter: dict[str, Any], source: SourceMetadata) -> set[str]:
        tags = {f"kiro-{frontmatter['inclusion']}"}
        found = foundational_type(source.name)
        if found:
            tags.add(f"kiro-{found}")
        segment = PATTERN_SEGMENT.search(str(frontmatter.get("fileMatchPattern") or ""))
        if segment:
            tags.add(segment.group(1))
        return tags

    def detect_subtype(self, frontmatter: dict[str, Any]) -> Subtype:
        return Subtype.RULE
