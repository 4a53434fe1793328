"""Gemini CLI custom command exporter (``.gemini/commands/*.toml``).

The command is a TOML table: ``description`` plus a multi-line ``prompt``
holding the rendered sections. A persona opens the prompt; tools have no
Gemini equivalent.
"""

import tomlkit

from rulecast.exporters.base import DialectExporter, ExportReport, collapse_lines
from rulecast.models.canonical import CanonicalPackage, PackageFormat, SectionKind
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify


class GeminiExporter(DialectExporter):
    """Render a package as a Gemini TOML command."""

    format = PackageFormat.GEMINI
    extra_sections = frozenset({SectionKind.PERSONA})

    def render(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> str:
        prompt = "\n\n".join(self.render_body(package, report))
        self.report_foreign_metadata(package, report)

        document = tomlkit.document()
        description = collapse_lines(package.display_description)
        if description:
            document.add("description", description)
        document.add("prompt", tomlkit.string(prompt + "\n", multiline=True))
        return tomlkit.dumps(document)

    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        return f".gemini/commands/{slugify(package.name)}.toml"
