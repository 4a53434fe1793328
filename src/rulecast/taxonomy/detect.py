"""Subtype and dialect detection.

Two entry points:
- detect_subtype_from_frontmatter: classify a document by its own markers
- detect_dialect: recognise a dialect from its conventional file location
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from rulecast.models.canonical import PackageFormat, Subtype, parse_subtype

# Legacy single-purpose markers: (frontmatter key, expected value, subtype)
LEGACY_SUBTYPE_MARKERS: tuple[tuple[str, str, Subtype], ...] = (
    ("agentType", "agent", Subtype.AGENT),
    ("skillType", "skill", Subtype.SKILL),
    ("commandType", "slash-command", Subtype.SLASH_COMMAND),
)


def detect_subtype_from_frontmatter(
    frontmatter: Mapping[str, Any],
    default: Subtype = Subtype.RULE,
) -> Subtype:
    """Detect a package subtype from frontmatter markers.

    An explicit ``subtype`` key wins; otherwise the legacy ``agentType``,
    ``skillType`` and ``commandType`` markers are checked in that order.

    Args:
        frontmatter: Parsed frontmatter mapping
        default: Subtype returned when no marker is present

    Returns:
        Detected subtype
    """
    explicit = frontmatter.get("subtype")
    if isinstance(explicit, str) and explicit:
        try:
            return parse_subtype(explicit)
        except ValueError:
            pass

    for key, expected, subtype in LEGACY_SUBTYPE_MARKERS:
        if frontmatter.get(key) == expected:
            return subtype

    return default


@dataclass(frozen=True)
class DialectMatch:
    """Result of recognising a file's dialect from its path.

    Attributes:
        format: Detected dialect
        subtype: Subtype implied by the location, if any
    """

    format: PackageFormat
    subtype: Subtype | None = None


# Exact filenames, checked before directory conventions
KNOWN_FILENAMES: dict[str, DialectMatch] = {
    ".cursorrules": DialectMatch(PackageFormat.CURSOR, Subtype.RULE),
    "claude.md": DialectMatch(PackageFormat.CLAUDE, Subtype.RULE),
    "copilot-instructions.md": DialectMatch(PackageFormat.COPILOT, Subtype.RULE),
    ".windsurfrules": DialectMatch(PackageFormat.WINDSURF, Subtype.RULE),
    "agents.md": DialectMatch(PackageFormat.AGENTS_MD, Subtype.RULE),
    "conventions.md": DialectMatch(PackageFormat.AIDER, Subtype.RULE),
}

# Directory conventions: (consecutive path parts, match)
KNOWN_DIRECTORIES: tuple[tuple[tuple[str, ...], DialectMatch], ...] = (
    ((".cursor", "rules"), DialectMatch(PackageFormat.CURSOR, Subtype.RULE)),
    ((".claude", "agents"), DialectMatch(PackageFormat.CLAUDE, Subtype.AGENT)),
    ((".claude", "skills"), DialectMatch(PackageFormat.CLAUDE, Subtype.SKILL)),
    ((".claude", "commands"), DialectMatch(PackageFormat.CLAUDE, Subtype.SLASH_COMMAND)),
    ((".github", "instructions"), DialectMatch(PackageFormat.COPILOT, Subtype.RULE)),
    ((".github", "chatmodes"), DialectMatch(PackageFormat.COPILOT, Subtype.CHATMODE)),
    ((".kiro", "steering"), DialectMatch(PackageFormat.KIRO, Subtype.RULE)),
    ((".windsurf", "rules"), DialectMatch(PackageFormat.WINDSURF, Subtype.RULE)),
    ((".trae", "rules"), DialectMatch(PackageFormat.TRAE, Subtype.RULE)),
    ((".factory", "commands"), DialectMatch(PackageFormat.DROID, Subtype.SLASH_COMMAND)),
    ((".factory", "skills"), DialectMatch(PackageFormat.DROID, Subtype.SKILL)),
    ((".factory", "droids"), DialectMatch(PackageFormat.DROID, Subtype.AGENT)),
    ((".gemini", "commands"), DialectMatch(PackageFormat.GEMINI, Subtype.SLASH_COMMAND)),
    ((".continue", "rules"), DialectMatch(PackageFormat.CONTINUE, Subtype.RULE)),
    ((".continue", "prompts"), DialectMatch(PackageFormat.CONTINUE, Subtype.PROMPT)),
    ((".ruler",), DialectMatch(PackageFormat.RULER, Subtype.RULE)),
    ((".zencoder", "rules"), DialectMatch(PackageFormat.ZENCODER, Subtype.RULE)),
    ((".kiro", "agents"), DialectMatch(PackageFormat.KIRO_AGENT, Subtype.AGENT)),
)


def _contains_run(parts: tuple[str, ...], run: tuple[str, ...]) -> bool:
    width = len(run)
    return any(parts[i : i + width] == run for i in range(len(parts) - width + 1))


def detect_dialect(path: str | PurePath) -> DialectMatch | None:
    """Recognise a dialect from a conventional file location.

    Args:
        path: File path (absolute or relative)

    Returns:
        DialectMatch, or None if the path follows no known convention
    """
    pure = PurePath(path)
    name = pure.name.lower()
    parts = tuple(part.lower() for part in pure.parts[:-1])

    for run, match in KNOWN_DIRECTORIES:
        if _contains_run(parts, run):
            return match

    if name in KNOWN_FILENAMES:
        return KNOWN_FILENAMES[name]
    if name.endswith(".mdc"):
        return DialectMatch(PackageFormat.CURSOR, Subtype.RULE)
    if name.endswith(".instructions.md"):
        return DialectMatch(PackageFormat.COPILOT, Subtype.RULE)
    if name.endswith(".chatmode.md"):
        return DialectMatch(PackageFormat.COPILOT, Subtype.CHATMODE)

    return None
