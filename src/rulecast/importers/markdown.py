"""Streaming markdown segmenter shared by the structural importers.

The segmenter walks a markdown body line by line and produces typed canonical
sections:

- The first ``#`` heading is the document title; its leading emoji becomes
  the icon. Optionally the following prose paragraph is the description.
- Content between the title and the first ``##`` heading forms an implicit
  section titled after the document; it is dropped when empty.
- Every ``##`` heading (and any later ``#`` heading) starts a new section
  whose kind comes from ``infer_section_type``.
- Fenced code is tracked so its content is never read as structure.
"""

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from rulecast.heuristics import DEFAULT_HEURISTICS, SectionHeuristics
from rulecast.importers.inference import (
    FENCE_PATTERN,
    HEADING_PATTERN,
    LIST_ITEM_PATTERN,
    infer_section_type,
)
from rulecast.models.canonical import (
    DEFAULT_TITLES,
    ContextSection,
    CustomSection,
    Example,
    ExamplesSection,
    InstructionsSection,
    Rule,
    RulesSection,
    Section,
    SectionKind,
)

logger = logging.getLogger(__name__)

# Receives the raw text of the implicit section; returns a replacement or None
PreambleParser = Callable[[str], Section | None]

EMOJI_TITLE_PATTERN = re.compile(r"^([\U0001F000-\U0001FAFF\u2600-\u27BF\u2B00-\u2BFF]\uFE0F?)\s+(.+)$")
GOOD_EXAMPLE_PREFIX = re.compile(r"^(?:preferred|good|correct|do)\s*:\s*", re.IGNORECASE)
BAD_EXAMPLE_PREFIX = re.compile(
    r"^(?:avoid|bad|incorrect|don't|dont)\s*:\s*", re.IGNORECASE
)
GOOD_MARKERS = ("✅", "✔", "✓")
BAD_MARKERS = ("❌", "✗", "✘")
RATIONALE_PATTERN = re.compile(r"^(?:rationale|why)\s*:\s*(.*)$", re.IGNORECASE)
INLINE_EXAMPLE_PATTERN = re.compile(r"^example\s*:\s*(.*)$", re.IGNORECASE)
BOLD_RULE_PATTERN = re.compile(r"^\*\*([^*]+)\*\*\s*:?\s*(.*)$")


def split_title_icon(text: str) -> tuple[str, str | None]:
    """Split a leading emoji icon from heading text."""
    match = EMOJI_TITLE_PATTERN.match(text.strip())
    if match:
        return match.group(2).strip(), match.group(1)
    return text.strip(), None


def parse_example_header(text: str) -> tuple[str, bool | None]:
    """Parse a ``###`` example header into (description, good flag).

    ``✅``/``Preferred:`` mark a good example, ``❌``/``Avoid:`` a bad one;
    anything else is neutral.
    """
    description = text.strip()
    good: bool | None = None

    for marker in GOOD_MARKERS:
        if description.startswith(marker):
            good, description = True, description[len(marker) :].strip()
            break
    else:
        for marker in BAD_MARKERS:
            if description.startswith(marker):
                good, description = False, description[len(marker) :].strip()
                break

    if GOOD_EXAMPLE_PREFIX.match(description):
        description = GOOD_EXAMPLE_PREFIX.sub("", description, count=1)
        good = True if good is None else good
    elif BAD_EXAMPLE_PREFIX.match(description):
        description = BAD_EXAMPLE_PREFIX.sub("", description, count=1)
        good = False if good is None else good

    return description.strip(), good


def _strip_sub_bullet(text: str) -> str:
    """Remove a sub-bullet marker and surrounding emphasis from a rule line."""
    text = re.sub(r"^[-*+]\s+", "", text.strip())
    if len(text) > 2 and text[0] == text[-1] and text[0] in "*_" and text[1] != text[0]:
        text = text[1:-1].strip()
    return text


@dataclass
class SegmentedDocument:
    """Result of segmenting a markdown body.

    Attributes:
        title: Text of the first level-1 heading
        icon: Emoji prefix of the title
        description: Consumed description paragraph
        sections: Body sections in document order
    """

    title: str | None = None
    icon: str | None = None
    description: str | None = None
    sections: list[Section] = field(default_factory=list)


@dataclass
class _Fence:
    marker: str
    language: str | None
    opening: str
    lines: list[str] = field(default_factory=list)

    def closes(self, line: str) -> bool:
        stripped = line.strip()
        return (
            len(stripped) >= len(self.marker)
            and set(stripped) == {self.marker[0]}
        )


@dataclass
class _RuleDraft:
    content: str
    rationale: str | None = None
    examples: list[str] = field(default_factory=list)


@dataclass
class _OpenSection:
    """Mutable state for the section being scanned."""

    kind: SectionKind | None
    title: str
    implicit: bool = False
    raw: list[str] = field(default_factory=list)
    prose: list[str] = field(default_factory=list)
    rules: list[_RuleDraft] = field(default_factory=list)
    ordered: bool = False
    examples: list[Example] = field(default_factory=list)
    pending_example: tuple[str, bool | None] | None = None
    last_prose: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (
            any(line.strip() for line in self.prose) or self.rules or self.examples
        )


class MarkdownSegmenter:
    """Line scanner that turns a markdown body into canonical sections.

    Attributes:
        heuristics: Keyword tables and lookahead window for inference
    """

    def __init__(self, heuristics: SectionHeuristics = DEFAULT_HEURISTICS) -> None:
        self.heuristics = heuristics

    def segment(
        self,
        body: str,
        *,
        consume_description: bool = False,
        section_hints: Mapping[str, str] | None = None,
        preamble_parser: PreambleParser | None = None,
    ) -> SegmentedDocument:
        """Segment a markdown body.

        Args:
            body: Markdown text without frontmatter
            consume_description: Treat the first prose paragraph after the
                title as the document description
            section_hints: Lower-cased heading text to section kind
            preamble_parser: Optional hook that may claim the implicit section

        Returns:
            SegmentedDocument
        """
        doc = SegmentedDocument()
        lines = body.splitlines()
        hints = section_hints or {}

        current: _OpenSection | None = None
        fence: _Fence | None = None
        awaiting_description = False
        description_lines: list[str] = []

        def finish_description() -> None:
            nonlocal awaiting_description
            if description_lines and doc.description is None:
                doc.description = " ".join(description_lines)
            awaiting_description = False

        for index, line in enumerate(lines):
            if fence is not None:
                if current is not None:
                    current.raw.append(line)
                if fence.closes(line) and current is not None:
                    self._close_fence(current, fence, line)
                    fence = None
                else:
                    fence.lines.append(line)
                continue

            heading = HEADING_PATTERN.match(line)
            level = len(heading.group(1)) if heading else 0

            if heading and level <= 2:
                finish_description()
                if current is not None:
                    self._flush(doc, current, preamble_parser)
                text = heading.group(2)

                if level == 1 and doc.title is None:
                    doc.title, doc.icon = split_title_icon(text)
                    current = _OpenSection(kind=None, title=doc.title, implicit=True)
                    awaiting_description = consume_description
                    continue

                kind = infer_section_type(text, lines, index, self.heuristics, hints)
                current = _OpenSection(kind=kind, title=text)
                continue

            if current is None:
                current = _OpenSection(kind=None, title="", implicit=True)

            if awaiting_description:
                if not line.strip():
                    if description_lines:
                        finish_description()
                    continue
                if self._is_prose(line):
                    description_lines.append(line.strip())
                    continue
                finish_description()

            if current.kind is None:
                if not line.strip():
                    continue
                current.kind = infer_section_type(
                    current.title, lines, index - 1, self.heuristics, hints
                )

            current.raw.append(line)

            fence_match = FENCE_PATTERN.match(line)
            if fence_match:
                fence = _Fence(
                    marker=fence_match.group("fence"),
                    language=fence_match.group("info") or None,
                    opening=line,
                )
                continue

            self._scan_line(current, line, heading)

        if fence is not None and current is not None:
            logger.debug("Unclosed code fence at end of document, closing it")
            self._close_fence(current, fence, fence.marker)
        finish_description()
        if current is not None:
            self._flush(doc, current, preamble_parser)

        return doc

    # =========================================================================
    # Line handling
    # =========================================================================

    @staticmethod
    def _is_prose(line: str) -> bool:
        return not (
            HEADING_PATTERN.match(line)
            or LIST_ITEM_PATTERN.match(line)
            or FENCE_PATTERN.match(line)
            or line.lstrip().startswith((">", "|", "<"))
        )

    def _scan_line(
        self, section: _OpenSection, line: str, heading: re.Match[str] | None
    ) -> None:
        match section.kind:
            case SectionKind.EXAMPLES:
                if heading is not None:
                    section.pending_example = parse_example_header(heading.group(2))
                elif line.strip():
                    section.last_prose = line.strip().rstrip(":")
            case SectionKind.RULES:
                self._scan_rule_line(section, line)
            case _:
                section.prose.append(line)

    def _scan_rule_line(self, section: _OpenSection, line: str) -> None:
        if not line.strip():
            return

        item = LIST_ITEM_PATTERN.match(line)
        indent = len(item.group("indent").expandtabs(4)) if item else 0

        if item and indent < 2:
            if not section.rules:
                section.ordered = item.group("marker")[0].isdigit()
            section.rules.append(_RuleDraft(content=item.group("text").strip()))
            return

        bold = BOLD_RULE_PATTERN.match(line)
        if bold:
            # "**Name**: description" keeps the description, or the name alone
            section.rules.append(_RuleDraft(content=bold.group(2).strip() or bold.group(1).strip()))
            return

        if line[:1] in (" ", "\t") and section.rules:
            rule = section.rules[-1]
            text = _strip_sub_bullet(line)
            rationale = RATIONALE_PATTERN.match(text)
            example = INLINE_EXAMPLE_PATTERN.match(text)
            if rationale:
                rule.rationale = rationale.group(1).strip()
            elif example:
                token = example.group(1).strip()
                if len(token) >= 2 and token.startswith("`") and token.endswith("`"):
                    token = token[1:-1]
                rule.examples.append(token)
            else:
                rule.content = f"{rule.content} {line.strip()}"
            return

        logger.debug("Dropping prose outside list items in rules section %r: %s", section.title, line.strip())

    def _close_fence(self, section: _OpenSection, fence: _Fence, closing: str) -> None:
        code = "\n".join(fence.lines)
        if section.kind is SectionKind.EXAMPLES:
            description, good = section.pending_example or (section.last_prose or "Example", None)
            section.examples.append(
                Example(description=description or "Example", code=code, language=fence.language, good=good)
            )
            section.pending_example = None
            section.last_prose = None
        elif section.kind is SectionKind.RULES:
            logger.debug("Dropping code block inside rules section %r", section.title)
        else:
            section.prose.extend([fence.opening, *fence.lines, closing])

    # =========================================================================
    # Section building
    # =========================================================================

    def _flush(
        self,
        doc: SegmentedDocument,
        section: _OpenSection,
        preamble_parser: PreambleParser | None,
    ) -> None:
        if section.implicit:
            raw_text = "\n".join(section.raw).strip()
            if not raw_text:
                return
            if preamble_parser is not None:
                claimed = preamble_parser(raw_text)
                if claimed is not None:
                    doc.sections.append(claimed)
                    return
            if section.is_empty:
                return

        doc.sections.append(self._build(section))

    @staticmethod
    def _build(section: _OpenSection) -> Section:
        kind = section.kind or SectionKind.INSTRUCTIONS
        title = section.title or DEFAULT_TITLES[kind]
        prose = "\n".join(section.prose).strip()

        match kind:
            case SectionKind.RULES:
                return RulesSection(
                    title=title,
                    items=tuple(
                        Rule(
                            content=rule.content,
                            rationale=rule.rationale,
                            examples=tuple(rule.examples),
                        )
                        for rule in section.rules
                    ),
                    ordered=section.ordered,
                )
            case SectionKind.EXAMPLES:
                return ExamplesSection(title=title, examples=tuple(section.examples))
            case SectionKind.CONTEXT:
                return ContextSection(title=title, content=prose)
            case SectionKind.CUSTOM:
                return CustomSection(content=prose, title=title)
            case _:
                return InstructionsSection(title=title, content=prose)
