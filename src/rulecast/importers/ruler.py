"""Ruler rule importer (``.ruler/*.md``).

Ruler files are plain markdown. Files written by rulecast open with HTML
comment headers naming the package, its author and its description; the
headers are read and removed before segmentation.
"""

import re
from dataclasses import replace
from typing import Any

from rulecast.importers.frontmatter import ParsedDocument
from rulecast.importers.markdown import SegmentedDocument
from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import MetadataSection, PackageFormat, SourceMetadata

HEADER_PATTERN = re.compile(r"^<!--\s*(Package|Author|Description)\s*:\s*(.*?)\s*-->\s*$", re.IGNORECASE)


def split_header(text: str) -> tuple[dict[str, str], str]:
    """Split leading ``<!-- Key: value -->`` lines from the body."""
    header: dict[str, str] = {}
    lines = text.lstrip("\ufeff").splitlines()
    index = 0
    while index < len(lines):
        match = HEADER_PATTERN.match(lines[index].strip())
        if match is None:
            break
        header[match.group(1).lower()] = match.group(2)
        index += 1
    return header, "\n".join(lines[index:])


class RulerImporter(StructuredImporter):
    """Import Ruler markdown rules."""

    format = PackageFormat.RULER

    def split_document(self, text: str) -> ParsedDocument:
        header, body = split_header(text)
        # The header description is only a fallback; the body paragraph wins
        if "description" in header:
            header["summary"] = header.pop("description")
        return ParsedDocument(frontmatter=dict(header), body=body, has_frontmatter=bool(header))

    def build_metadata(
        self,
        frontmatter: dict[str, Any],
        doc: SegmentedDocument,
        source: SourceMetadata,
        side_channel: dict[str, Any],
    ) -> MetadataSection:
        """The header description and author fill in what the body lacks."""
        metadata = super().build_metadata({}, doc, source, side_channel)
        author = frontmatter.get("author")
        if metadata.author is None and author and author != "Unknown":
            metadata = replace(metadata, author=author)
        if not metadata.description and frontmatter.get("summary"):
            metadata = replace(metadata, description=frontmatter["summary"])
        return metadata
