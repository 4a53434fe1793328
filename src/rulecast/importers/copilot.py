"""GitHub Copilot instructions importer.

Repository-wide instructions (``.github/copilot-instructions.md``) carry no
frontmatter; path-specific ``*.instructions.md`` files may set ``applyTo``
as a glob string, a comma list, or a YAML list.
"""

from typing import Any

from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, SourceMetadata, Subtype
from rulecast.taxonomy import detect_subtype_from_frontmatter
from rulecast.utils.text import split_csv

COPILOT_SUBTYPES = {"chatmode": Subtype.CHATMODE, "tool": Subtype.TOOL}


class CopilotImporter(StructuredImporter):
    """Import Copilot repository-wide and path-specific instructions."""

    format = PackageFormat.COPILOT

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        apply_to = split_csv(frontmatter.get("applyTo"))
        return {"applyTo": apply_to} if apply_to else {}

    def detect_subtype(self, frontmatter: dict[str, Any]) -> Subtype:
        for key in ("subtype", "type"):
            value = frontmatter.get(key)
            if isinstance(value, str) and value.lower() in COPILOT_SUBTYPES:
                return COPILOT_SUBTYPES[value.lower()]
        return detect_subtype_from_frontmatter(frontmatter)
