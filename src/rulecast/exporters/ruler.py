"""Ruler rule exporter (``.ruler/*.md``).

Ruler concatenates plain markdown files, so each file opens with HTML
comment headers identifying its source package.
"""

from rulecast.exporters.base import DialectExporter, ExportReport, collapse_lines
from rulecast.models.canonical import CanonicalPackage, PackageFormat, Subtype
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify

SUBTYPE_PENALTIES: dict[Subtype, tuple[str, int]] = {
    Subtype.AGENT: ('Subtype "agent" may not be fully supported by Ruler\'s simple rule format', 10),
    Subtype.WORKFLOW: ('Subtype "workflow" may not be fully supported by Ruler\'s simple rule format', 10),
    Subtype.SLASH_COMMAND: ("Slash commands are not supported by Ruler", 20),
    Subtype.HOOK: ("Hooks are not supported by Ruler", 20),
}


class RulerExporter(DialectExporter):
    """Render a package as a Ruler markdown rule."""

    format = PackageFormat.RULER

    def render_header(self, package: CanonicalPackage) -> list[str]:
        lines = [
            f"<!-- Package: {package.name} -->",
            f"<!-- Author: {self.author(package)} -->",
        ]
        description = collapse_lines(package.display_description)
        if description:
            lines.append(f"<!-- Description: {description} -->")
        return ["\n".join(lines), *super().render_header(package)]

    @staticmethod
    def author(package: CanonicalPackage) -> str:
        meta = package.metadata_section
        return package.author or (meta.author if meta is not None else None) or "Unknown"

    def check_output(self, content: str, package: CanonicalPackage, report: ExportReport) -> None:
        if package.subtype in SUBTYPE_PENALTIES:
            message, points = SUBTYPE_PENALTIES[package.subtype]
            report.degrade(message, points)

    def suggest_filename(self, package: CanonicalPackage, options: ExportOptions | None = None) -> str:
        return f".ruler/{slugify(package.name)}.md"
