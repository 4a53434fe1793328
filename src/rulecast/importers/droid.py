"""Factory Droid importer (skills, slash commands and droids)."""

from typing import Any

from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, SourceMetadata, Subtype
from rulecast.taxonomy import detect_subtype_from_frontmatter
from rulecast.utils.text import split_csv


class DroidImporter(StructuredImporter):
    """Import Factory Droid files.

    Documents declaring an ``argument-hint`` are slash commands; otherwise
    they are skills unless the frontmatter names a subtype explicitly.
    """

    format = PackageFormat.DROID
    consumes_description = False

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if frontmatter.get("argument-hint"):
            data["argument-hint"] = str(frontmatter["argument-hint"])
        allowed = split_csv(frontmatter.get("allowed-tools"))
        if allowed:
            data["allowed-tools"] = allowed
        return data

    def detect_subtype(self, frontmatter: dict[str, Any]) -> Subtype:
        default = Subtype.SLASH_COMMAND if frontmatter.get("argument-hint") else Subtype.SKILL
        return detect_subtype_from_frontmatter(frontmatter, default=default)
