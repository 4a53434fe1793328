"""GitHub Copilot instructions exporter.

Packages with ``applyTo`` patterns (from export options or a Copilot
import) become path-specific ``.instructions.md`` files; everything else is
rendered as repository-wide instructions without frontmatter.
"""

from typing import Any

from rulecast.exporters.base import DialectExporter, ExportReport
from rulecast.models.canonical import CanonicalPackage, PackageFormat, Subtype
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify, split_csv


class CopilotExporter(DialectExporter):
    """Render a package as Copilot custom instructions."""

    format = PackageFormat.COPILOT

    def apply_to(self, package: CanonicalPackage, options: ExportOptions | None) -> list[str]:
        """Resolve applyTo patterns: options first, then stored Copilot data."""
        if options is not None and options.copilot is not None and options.copilot.apply_to:
            return list(options.copilot.apply_to)
        return split_csv(self.side_channel(package).get("applyTo"))

    def frontmatter(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> dict[str, Any]:
        patterns = self.apply_to(package, options)
        return {"applyTo": patterns} if patterns else {}

    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        name = package.name
        if options is not None and options.copilot is not None and options.copilot.instruction_name:
            name = options.copilot.instruction_name

        if package.subtype is Subtype.CHATMODE:
            return f".github/chatmodes/{slugify(name)}.chatmode.md"
        if self.apply_to(package, options):
            return f".github/instructions/{slugify(name)}.instructions.md"
        return ".github/copilot-instructions.md"
