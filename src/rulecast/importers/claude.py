"""Claude agent, skill and command importer.

Frontmatter fields: name, description, tools (comma list), model, icon.
A leading paragraph that starts with "You are" (or mentions "Your role is")
is read as a persona.
"""

import re
from typing import Any

from rulecast.importers.markdown import PreambleParser
from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, PersonaSection, Section, SourceMetadata, ToolsSection
from rulecast.utils.text import split_csv

YOU_ARE_PATTERN = re.compile(r"You are ([^,.\n]+)(?:,\s*(?:an?\s+)?([^.\n]+))?", re.IGNORECASE)
ROLE_IS_PATTERN = re.compile(r"Your role is\s+(?:to\s+be\s+)?(?:an?\s+)?([^.\n]+)", re.IGNORECASE)
STYLE_PATTERN = re.compile(
    r"(?:communication style is|\*\*style\*\*\s*:|^style\s*:)\s*([^.\n]+)",
    re.IGNORECASE | re.MULTILINE,
)


def parse_persona(text: str) -> PersonaSection | None:
    """Read a persona from preamble text, or None if it is not one."""
    stripped = text.strip()
    if not (stripped.startswith("You are ") or "Your role is" in stripped):
        return None

    name: str | None = None
    role = ""
    you_are = YOU_ARE_PATTERN.search(stripped)
    if you_are:
        first, second = you_are.group(1).strip(), (you_are.group(2) or "").strip()
        if second:
            name, role = first, second
        else:
            role = first
    if not role:
        role_is = ROLE_IS_PATTERN.search(stripped)
        role = role_is.group(1).strip() if role_is else stripped.splitlines()[0].strip()

    style: list[str] = []
    style_match = STYLE_PATTERN.search(stripped)
    if style_match:
        for part in re.split(r",|\s+and\s+", style_match.group(1)):
            part = part.strip().strip("*").strip()
            part = re.sub(r"^and\s+", "", part, flags=re.IGNORECASE)
            if part:
                style.append(part)

    expertise: list[str] = []
    in_expertise = False
    for line in stripped.splitlines():
        lowered = line.lower()
        if "expertise" in lowered or "areas of" in lowered:
            in_expertise = True
            continue
        if in_expertise and re.match(r"^\s*[-*]\s+", line):
            expertise.append(re.sub(r"^\s*[-*]\s+", "", line).strip())
        elif in_expertise and line.strip():
            in_expertise = False

    return PersonaSection(role=role, name=name, style=tuple(style), expertise=tuple(expertise))


class ClaudeImporter(StructuredImporter):
    """Import Claude agents, skills, slash commands and CLAUDE.md files."""

    format = PackageFormat.CLAUDE
    consumes_description = False

    def preamble_parser(self) -> PreambleParser | None:
        return parse_persona

    def leading_sections(self, frontmatter: dict[str, Any]) -> list[Section]:
        tools = split_csv(frontmatter.get("tools"))
        return [ToolsSection(tools=tuple(tools))] if tools else []

    def side_channel(self, frontmatter: dict[str, Any], source: SourceMetadata) -> dict[str, Any]:
        if frontmatter.get("model"):
            return {"model": str(frontmatter["model"])}
        return {}
