"""Importers for heading-structured dialects without frontmatter.

Windsurf, AGENTS.md, Trae and Aider files are plain markdown; structure is
recovered from headings alone and the paragraph after the title is the
description.
"""

from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat


class WindsurfImporter(StructuredImporter):
    """Import ``.windsurfrules`` files."""

    format = PackageFormat.WINDSURF


class AgentsMdImporter(StructuredImporter):
    """Import ``AGENTS.md`` files."""

    format = PackageFormat.AGENTS_MD


class TraeImporter(StructuredImporter):
    """Import ``.trae/rules`` files."""

    format = PackageFormat.TRAE


class AiderImporter(StructuredImporter):
    """Import Aider ``CONVENTIONS.md`` files."""

    format = PackageFormat.AIDER
