"""Zencoder rule importer (``.zencoder/rules/*.md``).

Frontmatter is optional; when present it may hold ``description``,
``globs`` and ``alwaysApply``.
"""

from typing import Any

from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, SourceMetadata
from rulecast.utils.text import split_csv


class ZencoderImporter(StructuredImporter):
    """Import Zencoder rules."""

    format = PackageFormat.ZENCODER

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        data: dict[str, Any] = {}
        globs = split_csv(frontmatter.get("globs"))
        if globs:
            data["globs"] = globs
        if "alwaysApply" in frontmatter:
            data["alwaysApply"] = bool(frontmatter["alwaysApply"])
        return data
