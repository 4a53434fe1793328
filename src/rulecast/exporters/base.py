"""Abstract base class for dialect exporters.

All exporters share one rendering pipeline:
1. Optional YAML frontmatter built from package fields and export options
2. ``# Title`` and, for dialects without a frontmatter description, the
   description paragraph
3. Each canonical section rendered in document order; variants the dialect
   cannot express are skipped and reported
4. The rendered text checked against the dialect schema
5. Warnings, schema violations and dialect penalties scored into a 0-100
   quality score

``export`` never raises: any failure becomes an empty, zero-quality result
whose warning explains what went wrong.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, assert_never

import yaml

from rulecast.heuristics import DEFAULT_SCORING, ScoringPolicy
from rulecast.models.canonical import (
    CanonicalPackage,
    ContextSection,
    CustomSection,
    ExamplesSection,
    InstructionsSection,
    MetadataSection,
    PackageFormat,
    PersonaSection,
    RulesSection,
    Section,
    SectionKind,
    ToolsSection,
    section_title,
)
from rulecast.models.conversion import ConversionResult, ExportOptions
from rulecast.utils.text import longest_backtick_run
from rulecast.validation import validate_output

logger = logging.getLogger(__name__)

DISPLAY_NAMES: dict[str, str] = {
    PackageFormat.CURSOR.value: "Cursor",
    PackageFormat.CLAUDE.value: "Claude",
    PackageFormat.COPILOT.value: "Copilot",
    PackageFormat.KIRO.value: "Kiro",
    PackageFormat.WINDSURF.value: "Windsurf",
    PackageFormat.AGENTS_MD.value: "AGENTS.md",
    PackageFormat.TRAE.value: "Trae",
    PackageFormat.DROID.value: "Droid",
    PackageFormat.AIDER.value: "Aider",
    PackageFormat.GEMINI.value: "Gemini",
    PackageFormat.CONTINUE.value: "Continue",
    PackageFormat.RULER.value: "Ruler",
    PackageFormat.ZENCODER.value: "Zencoder",
    PackageFormat.KIRO_AGENT.value: "Kiro Agent",
    PackageFormat.GENERIC.value: "Markdown",
}

# Section kinds every dialect can express
COMMON_SECTIONS = frozenset(
    {
        SectionKind.METADATA,
        SectionKind.INSTRUCTIONS,
        SectionKind.RULES,
        SectionKind.EXAMPLES,
        SectionKind.CONTEXT,
        SectionKind.CUSTOM,
    }
)


class ConversionError(Exception):
    """Raised by an exporter that cannot produce valid output.

    Never escapes ``DialectExporter.export``; it is converted into a
    zero-quality ConversionResult.
    """

    def __init__(self, dialect: str, message: str) -> None:
        self.dialect = dialect
        super().__init__(message)


@dataclass
class ExportReport:
    """Warnings, skip count and extra penalty accumulated while rendering one package."""

    warnings: list[str] = field(default_factory=list)
    skipped_sections: int = 0
    penalty: int = 0

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def degrade(self, message: str, points: int) -> None:
        """Warn and deduct points for content the dialect can only approximate."""
        self.warnings.append(message)
        self.penalty += points

    def skip(self, message: str) -> None:
        self.warnings.append(message)
        self.skipped_sections += 1


def collapse_lines(text: str) -> str:
    """Join multi-line text into one line (for titles, rules, descriptions)."""
    return " ".join(text.split())


def render_frontmatter(data: dict[str, Any]) -> str:
    """Render a frontmatter block, keeping key order."""
    body = yaml.safe_dump(
        data,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=10_000,
    )
    return f"---\n{body.rstrip()}\n---"


class DialectExporter(ABC):
    """Abstract interface for dialect exporters.

    Attributes:
        format: Target dialect
        extra_sections: Section kinds supported beyond the common set
        description_in_frontmatter: The dialect carries the description in
            frontmatter, so no description paragraph is rendered
        tools_destination: Where a dialect that keeps tools sections lists them
        scoring: Penalty policy for the quality score
    """

    format: PackageFormat
    extra_sections: frozenset[SectionKind] = frozenset()
    description_in_frontmatter: bool = False
    tools_destination: str = "the tools list"

    def __init__(self, scoring: ScoringPolicy = DEFAULT_SCORING) -> None:
        """Initialize the exporter.

        Args:
            scoring: Penalty policy used for quality scores
        """
        self.scoring = scoring

    @property
    def dialect(self) -> str:
        return self.format.value

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self.dialect]

    @property
    def supported_sections(self) -> frozenset[SectionKind]:
        return COMMON_SECTIONS | self.extra_sections

    # =========================================================================
    # Public API
    # =========================================================================

    def export(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> ConversionResult:
        """Render a canonical package in this dialect.

        Args:
            package: Package to render
            options: Per-dialect export settings

        Returns:
            ConversionResult; content is empty if the conversion failed
        """
        options = options or ExportOptions()
        report = ExportReport()

        try:
            content = self.render(package, options, report)
        except Exception as e:
            logger.warning("Export of %s to %s failed: %s", package.id, self.dialect, e)
            return ConversionResult.failed(self.dialect, f"Conversion error: {e}")

        validation = validate_output(self.dialect, content, package.subtype.value)

        lossy = self.scoring.is_lossy(report.warnings)
        score = self.scoring.score(
            report.skipped_sections,
            lossy,
            validation_errors=len(validation.errors),
            extra_penalty=report.penalty,
        )
        for warning in report.warnings:
            logger.debug("%s -> %s: %s", package.id, self.dialect, warning)
        if not validation.valid:
            logger.warning(
                "%s -> %s: output does not match the %s schema (%d errors)",
                package.id,
                self.dialect,
                validation.schema,
                len(validation.errors),
            )

        return ConversionResult(
            content=content,
            format=self.dialect,
            warnings=report.warnings,
            lossy_conversion=lossy,
            quality_score=score,
            validation_errors=validation.messages,
        )

    @abstractmethod
    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        """Return the conventional relative path for this package.

        Pure: depends only on package identity and the dialect's naming
        convention.
        """

    # =========================================================================
    # Rendering pipeline
    # =========================================================================

    def render(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> str:
        """Render the full document text."""
        blocks: list[str] = []

        frontmatter = self.frontmatter(package, options, report)
        if frontmatter:
            blocks.append(render_frontmatter(frontmatter))

        blocks.extend(self.render_header(package))

        description = collapse_lines(package.display_description)
        if description and not (self.description_in_frontmatter or "description" in frontmatter):
            blocks.append(description)

        blocks.extend(self.render_body(package, report))
        self.report_foreign_metadata(package, report)

        content = "\n\n".join(blocks) + "\n"
        self.check_output(content, package, report)
        return content

    def render_header(self, package: CanonicalPackage) -> list[str]:
        """Blocks placed before the description, normally the ``# Title``."""
        return [f"# {self.render_title(package)}"]

    def render_body(self, package: CanonicalPackage, report: ExportReport) -> list[str]:
        """Render every section in output order, skipping empty blocks."""
        blocks: list[str] = []
        for section in self.ordered_sections(package, report):
            block = self.render_section(section, report)
            if block:
                blocks.append(block)
        return blocks

    def frontmatter(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> dict[str, Any]:
        """Return frontmatter fields; empty for dialects without frontmatter."""
        return {}

    def render_title(self, package: CanonicalPackage) -> str:
        return collapse_lines(package.title)

    def ordered_sections(self, package: CanonicalPackage, report: ExportReport) -> Iterable[Section]:
        """Return sections in output order, reporting any reordering.

        Dialects that keep tools and a persona can only hold tools in one
        list and one persona as the opening paragraph, so a re-import always
        yields ``[tools, persona, *rest]``. Any other layout is reported.
        """
        hoisted = [k for k in (SectionKind.TOOLS, SectionKind.PERSONA) if k in self.extra_sections]
        if not hoisted:
            return package.sections

        kinds = [
            s.kind
            for s in package.sections
            if s.kind is not SectionKind.METADATA and s.kind in self.supported_sections
        ]
        expected = [k for k in hoisted if k in kinds]
        expected.extend(k for k in kinds if k not in hoisted)

        destinations = {
            SectionKind.TOOLS: f"merged into {self.tools_destination}",
            SectionKind.PERSONA: "merged into the opening persona",
        }
        for kind in hoisted:
            if kind not in kinds:
                continue
            label = kind.label
            if kinds.index(kind) != expected.index(kind):
                report.warn(f"{label} section moved to the top (position not supported by {self.display_name})")
            extra = kinds.count(kind) - 1
            if extra:
                report.warn(
                    f"{extra} extra {label} section(s) {destinations[kind]} "
                    f"(multiple {label.lower()} sections not supported by {self.display_name})"
                )

        personas = [s for s in package.sections if s.kind is SectionKind.PERSONA]
        others = [s for s in package.sections if s.kind is not SectionKind.PERSONA]
        return [*personas, *others]

    def check_output(self, content: str, package: CanonicalPackage, report: ExportReport) -> None:
        """Add dialect-specific advisories about the rendered text."""

    def side_channel(self, package: CanonicalPackage) -> dict[str, Any]:
        """Return this dialect's round-trip fields from the package.

        Package-level metadata wins over the metadata section copy.
        """
        data: dict[str, Any] = {}
        meta = package.metadata_section
        if meta is not None:
            data.update(meta.dialect_data.get(self.dialect, {}))
        data.update(package.dialect_data(self.dialect))
        return data

    def report_foreign_metadata(self, package: CanonicalPackage, report: ExportReport) -> None:
        """Warn about side-channel fields owned by other dialects."""
        foreign: dict[str, set[str]] = {}
        meta = package.metadata_section
        sources = [package.metadata]
        if meta is not None:
            sources.append(meta.dialect_data)
        for source in sources:
            for dialect, fields in source.items():
                if dialect != self.dialect and fields:
                    foreign.setdefault(dialect, set()).update(fields)

        for dialect in sorted(foreign):
            name = DISPLAY_NAMES.get(dialect, dialect)
            keys = ", ".join(sorted(foreign[dialect]))
            report.warn(f"{name} metadata ({keys}) has no {self.display_name} equivalent and is absent from output")

    # =========================================================================
    # Section rendering
    # =========================================================================

    def skip_unsupported(self, section: Section, report: ExportReport) -> None:
        report.skip(
            f"{section.kind.label} section skipped (not supported by {self.display_name})"
        )

    def render_section(self, section: Section, report: ExportReport) -> str | None:
        """Render one section, or return None if it produces no body text."""
        if section.kind not in self.supported_sections:
            self.skip_unsupported(section, report)
            return None

        match section:
            case MetadataSection():
                return None
            case InstructionsSection() | ContextSection():
                return self.render_prose(section)
            case RulesSection():
                return self.render_rules(section)
            case ExamplesSection():
                return self.render_examples(section)
            case PersonaSection():
                return self.render_persona(section)
            case ToolsSection():
                return self.render_tools(section)
            case CustomSection():
                if section.editor_type and section.editor_type != self.dialect:
                    report.skip(
                        f"Custom {section.editor_type} section skipped "
                        f"(not supported by {self.display_name})"
                    )
                    return None
                return section.content.strip() or None
            case _:
                assert_never(section)

    def render_prose(self, section: InstructionsSection | ContextSection) -> str:
        heading = f"## {collapse_lines(section_title(section))}"
        content = section.content.strip()
        return f"{heading}\n\n{content}" if content else heading

    def render_rules(self, section: RulesSection) -> str:
        lines = [f"## {collapse_lines(section_title(section))}", ""]
        for number, rule in enumerate(section.items, start=1):
            prefix = f"{number}." if section.ordered else "-"
            lines.append(f"{prefix} {collapse_lines(rule.content)}")
            if rule.rationale:
                lines.append(f"   - *Rationale: {collapse_lines(rule.rationale)}*")
            for example in rule.examples:
                lines.append(f"   - Example: `{example}`")
        return "\n".join(lines).rstrip()

    def render_examples(self, section: ExamplesSection) -> str:
        lines = [f"## {collapse_lines(section_title(section))}"]
        for example in section.examples:
            description = collapse_lines(example.description) or "Example"
            if example.good is False:
                header = f"### ❌ Avoid: {description}"
            elif example.good is True:
                header = f"### ✅ Preferred: {description}"
            else:
                header = f"### {description}"

            fence = "`" * max(3, longest_backtick_run(example.code) + 1)
            lines.extend(["", header, "", f"{fence}{example.language or ''}", example.code, fence])
        return "\n".join(lines)

    def render_persona(self, section: PersonaSection) -> str:
        """Render a persona as preamble prose."""
        if section.name:
            lines = [f"You are {section.name}, {section.role}."]
        else:
            lines = [f"You are {section.role}."]
        if section.style:
            lines.extend(["", f"Your communication style is {', '.join(section.style)}."])
        if section.expertise:
            lines.extend(["", "Your areas of expertise include:"])
            lines.extend(f"- {area}" for area in section.expertise)
        return "\n".join(lines)

    def render_tools(self, section: ToolsSection) -> str | None:
        """Tools are carried in frontmatter by the dialects that support them."""
        return None
