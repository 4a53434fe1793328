"""Cursor rules importer (.mdc files and legacy .cursorrules)."""

from typing import Any

from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, SourceMetadata
from rulecast.utils.text import split_csv


class CursorImporter(StructuredImporter):
    """Import Cursor rules.

    The frontmatter ``description`` wins; the paragraph after the title is
    only read as the description when the frontmatter has none. ``globs``
    and ``alwaysApply`` are kept for re-export to Cursor.
    """

    format = PackageFormat.CURSOR

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        data: dict[str, Any] = {}
        globs = split_csv(frontmatter.get("globs"))
        if globs:
            data["globs"] = globs
        if "alwaysApply" in frontmatter:
            data["alwaysApply"] = bool(frontmatter["alwaysApply"])
        return data
