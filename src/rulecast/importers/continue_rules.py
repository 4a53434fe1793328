"""Continue rules and prompts importer (``.continue/rules``, ``.continue/prompts``).

Both kinds use YAML frontmatter with a ``name``. Prompts are marked
``invokable: true``; rules may scope themselves with ``globs``, ``regex``
and ``alwaysApply``, which are kept for re-export to Continue.
"""

from typing import Any

from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, SourceMetadata, Subtype
from rulecast.taxonomy import detect_subtype_from_frontmatter
from rulecast.utils.text import split_csv


class ContinueImporter(StructuredImporter):
    """Import Continue rules and invokable prompts."""

    format = PackageFormat.CONTINUE

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        data: dict[str, Any] = {}
        globs = split_csv(frontmatter.get("globs"))
        if globs:
            data["globs"] = globs
        if frontmatter.get("regex"):
            data["regex"] = str(frontmatter["regex"])
        if "alwaysApply" in frontmatter:
            data["alwaysApply"] = bool(frontmatter["alwaysApply"])
        return data

    def detect_subtype(self, frontmatter: dict[str, Any]) -> Subtype:
        if frontmatter.get("invokable") is True:
            return Subtype.PROMPT
        return detect_subtype_from_frontmatter(frontmatter)
