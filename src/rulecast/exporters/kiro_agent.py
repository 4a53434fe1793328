"""Kiro custom agent exporter (``.kiro/agents/*.json``).

The agent prompt holds the persona and the rendered sections; tools
sections become the ``tools`` list. MCP servers, hooks, resources and the
other agent settings are only re-emitted from a previous Kiro agent import.
"""

import json
from typing import Any

from rulecast.exporters.base import DialectExporter, ExportReport, collapse_lines
from rulecast.models.canonical import CanonicalPackage, PackageFormat, SectionKind, Subtype, ToolsSection
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify

AGENT_FIELDS = (
    "mcpServers",
    "toolAliases",
    "allowedTools",
    "toolsSettings",
    "resources",
    "hooks",
    "useLegacyMcpJson",
    "model",
)

# Subtypes an agent can only approximate: (message, penalty)
SUBTYPE_PENALTIES: dict[Subtype, tuple[str, int]] = {
    Subtype.SLASH_COMMAND: ("Slash commands are not supported by Kiro agents", 20),
    Subtype.SKILL: ("Skill packaging is not supported by Kiro agents; converted to an agent prompt", 10),
}


class KiroAgentExporter(DialectExporter):
    """Render a package as a Kiro agent configuration."""

    format = PackageFormat.KIRO_AGENT
    extra_sections = frozenset({SectionKind.PERSONA, SectionKind.TOOLS})

    def render(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> str:
        if package.subtype in SUBTYPE_PENALTIES:
            message, points = SUBTYPE_PENALTIES[package.subtype]
            report.degrade(message, points)

        config: dict[str, Any] = {
            "name": collapse_lines(package.title),
            "description": collapse_lines(package.display_description),
        }
        prompt = "\n\n".join(self.render_body(package, report))
        if prompt:
            config["prompt"] = prompt

        tools: list[str] = []
        for section in package.sections:
            if isinstance(section, ToolsSection):
                tools.extend(tool for tool in section.tools if tool not in tools)
        if tools:
            config["tools"] = tools

        stored = self.side_channel(package)
        for key in AGENT_FIELDS:
            if key in stored:
                config[key] = stored[key]

        self.report_foreign_metadata(package, report)
        return json.dumps(config, indent=2, ensure_ascii=False) + "\n"

    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        return f".kiro/agents/{slugify(package.name)}.json"
