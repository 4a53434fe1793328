"""Pure heuristics for section-type and tag inference.

Section kind priority: explicit hint > heading keyword > lookahead > default.

The lookahead scans the lines after a heading (up to the configured window,
stopping at the next level-1 or level-2 heading): the first list item makes
the section ``rules``; a code fence or ``###`` header makes it ``examples``.
A heading whose prose paragraph is longer than the window before its list
starts is therefore classified ``instructions`` and its list stays prose.
"""

import re
from collections.abc import Mapping, Sequence

from rulecast.heuristics import (
    DEFAULT_HEURISTICS,
    MAX_INFERRED_TAGS,
    TECH_KEYWORDS,
    SectionHeuristics,
)
from rulecast.models.canonical import SectionKind

HEADING_PATTERN = re.compile(r"^(#{1,6})\s+(.+?)\s*$")
LIST_ITEM_PATTERN = re.compile(r"^(?P<indent>[ \t]*)(?P<marker>[-*+]|\d+[.)])\s+(?P<text>.*)$")
FENCE_PATTERN = re.compile(r"^[ \t]{0,3}(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>[^`\s]*)[^`]*$")

# Section kinds a heading can be segmented into
BODY_KINDS = frozenset(
    {
        SectionKind.INSTRUCTIONS,
        SectionKind.RULES,
        SectionKind.EXAMPLES,
        SectionKind.CONTEXT,
        SectionKind.CUSTOM,
    }
)


def heading_level(line: str) -> int:
    """Return the ATX heading level of a line, or 0 if it is not a heading."""
    match = HEADING_PATTERN.match(line)
    return len(match.group(1)) if match else 0


def infer_section_type(
    heading: str,
    lines: Sequence[str],
    index: int,
    heuristics: SectionHeuristics = DEFAULT_HEURISTICS,
    hints: Mapping[str, str] | None = None,
) -> SectionKind:
    """Infer the kind of the section introduced at ``lines[index]``.

    Args:
        heading: Heading text (without the leading hashes)
        lines: All body lines
        index: Index of the heading line; lookahead starts at index + 1
        heuristics: Keyword tables and lookahead window
        hints: Lower-cased heading text to section kind

    Returns:
        Inferred SectionKind (never metadata, persona or tools)
    """
    if hints:
        hinted = hints.get(heading.strip().lower())
        if hinted is not None and SectionKind(hinted) in BODY_KINDS:
            return SectionKind(hinted)

    keyword_kind = heuristics.match_keyword(heading)
    if keyword_kind is not None:
        return keyword_kind

    start = index + 1
    for line in lines[start : start + heuristics.lookahead]:
        level = heading_level(line)
        if level == 3:
            return SectionKind.EXAMPLES
        if level:
            break
        if LIST_ITEM_PATTERN.match(line):
            return SectionKind.RULES
        if FENCE_PATTERN.match(line):
            return SectionKind.EXAMPLES

    return SectionKind.INSTRUCTIONS


def infer_tags(
    text: str,
    vocabulary: tuple[tuple[str, str], ...] = TECH_KEYWORDS,
    limit: int = MAX_INFERRED_TAGS,
) -> list[str]:
    """Infer technology tags from free text (best effort, never authoritative).

    Matching is whole-word and case-insensitive; tags are returned in
    vocabulary order without duplicates, at most ``limit`` of them.
    """
    lowered = text.lower()
    tags: list[str] = []
    for word, tag in vocabulary:
        if tag in tags:
            continue
        if re.search(rf"(?<![\w.]){re.escape(word)}(?!\w)", lowered):
            tags.append(tag)
            if len(tags) >= limit:
                break
    return tags
