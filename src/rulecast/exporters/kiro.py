"""Kiro steering file exporter.

Kiro requires an inclusion mode that canonical packages only carry when
they were imported from Kiro. Without one (from export options or the
package), the export fails explicitly instead of guessing.
"""

from typing import Any

from rulecast.exporters.base import ConversionError, DialectExporter, ExportReport
from rulecast.models.canonical import CanonicalPackage, PackageFormat
from rulecast.models.conversion import (
    INCLUSION_MODES,
    ExportOptions,
    InclusionMode,
    KiroOptions,
)
from rulecast.utils.text import slugify


class KiroExporter(DialectExporter):
    """Render a package as a ``.kiro/steering`` file."""

    format = PackageFormat.KIRO

    def resolve_options(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None,
    ) -> dict[str, Any]:
        """Merge explicit options over Kiro data stored in the package.

        Values are returned as found; stored data is not validated here.
        """
        stored = self.side_channel(package)
        explicit = options.kiro if options is not None and options.kiro is not None else KiroOptions()
        return {
            "inclusion": explicit.inclusion or stored.get("inclusion"),
            "fileMatchPattern": explicit.file_match_pattern or stored.get("fileMatchPattern"),
            "domain": explicit.domain or stored.get("domain"),
            "filename": explicit.filename or stored.get("filename"),
        }

    def frontmatter(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> dict[str, Any]:
        config = self.resolve_options(package, options)
        inclusion = config["inclusion"]

        if not inclusion:
            raise ConversionError(
                self.dialect,
                f"Kiro format requires inclusion mode ({'|'.join(INCLUSION_MODES)})",
            )
        if inclusion not in INCLUSION_MODES:
            raise ConversionError(
                self.dialect,
                f"Invalid Kiro inclusion mode: {inclusion}. Valid: {list(INCLUSION_MODES)}",
            )
        if inclusion == InclusionMode.FILE_MATCH.value and not config["fileMatchPattern"]:
            raise ConversionError(self.dialect, "fileMatch inclusion mode requires fileMatchPattern")

        data: dict[str, Any] = {"inclusion": inclusion}
        if inclusion == InclusionMode.FILE_MATCH.value:
            data["fileMatchPattern"] = config["fileMatchPattern"]
        if config["domain"]:
            data["domain"] = config["domain"]
        return data

    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        config = self.resolve_options(package, options)
        stem = next(
            (value for value in (config["filename"], config["domain"]) if isinstance(value, str) and value),
            package.name,
        )
        return f".kiro/steering/{slugify(stem.removesuffix('.md'))}.md"
