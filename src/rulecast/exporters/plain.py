"""Exporters for heading-structured dialects without frontmatter."""

from rulecast.exporters.base import DialectExporter, ExportReport
from rulecast.models.canonical import CanonicalPackage, PackageFormat
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify

WINDSURF_CHARACTER_LIMIT = 12_000


class WindsurfExporter(DialectExporter):
    """Render a package as a ``.windsurfrules`` file."""

    format = PackageFormat.WINDSURF

    def check_output(self, content: str, package: CanonicalPackage, report: ExportReport) -> None:
        if not package.display_description:
            report.warn("No description provided")
        if len(content) > WINDSURF_CHARACTER_LIMIT:
            report.warn(
                f"Content is {len(content):,} characters, over Windsurf's "
                f"{WINDSURF_CHARACTER_LIMIT:,} character limit"
            )

    def suggest_filename(self, package: CanonicalPackage, options: ExportOptions | None = None) -> str:
        return ".windsurfrules"


class AgentsMdExporter(DialectExporter):
    """Render a package as an ``AGENTS.md`` file."""

    format = PackageFormat.AGENTS_MD

    def suggest_filename(self, package: CanonicalPackage, options: ExportOptions | None = None) -> str:
        return "AGENTS.md"


class TraeExporter(DialectExporter):
    """Render a package as a ``.trae/rules`` file."""

    format = PackageFormat.TRAE

    def suggest_filename(self, package: CanonicalPackage, options: ExportOptions | None = None) -> str:
        return f".trae/rules/{slugify(package.name)}.md"


class AiderExporter(DialectExporter):
    """Render a package as Aider ``CONVENTIONS.md``."""

    format = PackageFormat.AIDER

    def suggest_filename(self, package: CanonicalPackage, options: ExportOptions | None = None) -> str:
        return "CONVENTIONS.md"
