"""Claude exporter for agents, skills, slash commands and CLAUDE.md.

Persona and tools sections are kept: the persona is rendered as the
opening paragraph and tools go to frontmatter.
"""

from typing import Any

from rulecast.exporters.base import DialectExporter, ExportReport, collapse_lines
from rulecast.models.canonical import (
    CanonicalPackage,
    PackageFormat,
    SectionKind,
    Subtype,
    ToolsSection,
)
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify


class ClaudeExporter(DialectExporter):
    """Render a package in Claude's markdown+frontmatter format."""

    format = PackageFormat.CLAUDE
    extra_sections = frozenset({SectionKind.PERSONA, SectionKind.TOOLS})
    description_in_frontmatter = True
    tools_destination = "frontmatter tools"

    def frontmatter(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": slugify(package.name),
            "description": collapse_lines(package.display_description),
        }

        tools: list[str] = []
        for section in package.sections:
            if isinstance(section, ToolsSection):
                tools.extend(tool for tool in section.tools if tool not in tools)
        if tools:
            data["tools"] = ", ".join(tools)

        model = self.side_channel(package).get("model")
        if model:
            data["model"] = model
        return data

    def render_title(self, package: CanonicalPackage) -> str:
        title = collapse_lines(package.title)
        meta = package.metadata_section
        if meta is not None and meta.icon:
            return f"{meta.icon} {title}"
        return title

    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        slug = slugify(package.name)
        match package.subtype:
            case Subtype.AGENT:
                return f".claude/agents/{slug}.md"
            case Subtype.SKILL:
                return f".claude/skills/{slug}/SKILL.md"
            case Subtype.SLASH_COMMAND:
                return f".claude/commands/{slug}.md"
            case _:
                return "CLAUDE.md"
