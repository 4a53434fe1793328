"""Kiro custom agent importer (``.kiro/agents/*.json``).

The agent's ``prompt`` is segmented as markdown (a leading "You are ..."
paragraph becomes the persona); ``tools`` becomes a tools section and the
remaining configuration is kept for re-export. A ``file://`` prompt only
references instructions stored elsewhere and is recorded as such.
"""

import json
from typing import Any

from rulecast.importers.base import MalformedDocumentError, MissingFieldError
from rulecast.importers.claude import parse_persona
from rulecast.importers.frontmatter import ParsedDocument
from rulecast.importers.markdown import PreambleParser
from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, Section, SourceMetadata, Subtype, ToolsSection
from rulecast.utils.text import split_csv

# Configuration carried through a canonical package untouched
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


class KiroAgentImporter(StructuredImporter):
    """Import Kiro agent JSON configurations."""

    format = PackageFormat.KIRO_AGENT
    consumes_description = False

    def split_document(self, text: str) -> ParsedDocument:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedDocumentError(self.dialect, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedDocumentError(self.dialect, f"expected a JSON object, got {type(data).__name__}")

        prompt = data.pop("prompt", None) or ""
        if not isinstance(prompt, str):
            raise MalformedDocumentError(self.dialect, "prompt must be a string")
        if prompt.startswith("file://"):
            prompt = f"## Instructions\n\nLoads instructions from: {prompt}\n"
        return ParsedDocument(frontmatter=data, body=prompt, has_frontmatter=True)

    def validate_frontmatter(self, frontmatter: dict[str, Any], source: SourceMetadata) -> None:
        if not frontmatter.get("name") and not frontmatter.get("description"):
            raise MissingFieldError(
                self.dialect,
                "name",
                "Kiro agent configurations require a 'name' or a 'description'",
            )

    def preamble_parser(self) -> PreambleParser | None:
        return parse_persona

    def leading_sections(self, frontmatter: dict[str, Any]) -> list[Section]:
        tools = split_csv(frontmatter.get("tools"))
        return [ToolsSection(tools=tuple(tools))] if tools else []

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        return {key: frontmatter[key] for key in AGENT_FIELDS if key in frontmatter}

    def detect_subtype(self, frontmatter: dict[str, Any]) -> Subtype:
        return Subtype.AGENT
