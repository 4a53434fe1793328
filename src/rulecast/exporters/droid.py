"""Factory Droid exporter."""

from typing import Any

from rulecast.exporters.base import DialectExporter, ExportReport, collapse_lines
from rulecast.models.canonical import CanonicalPackage, PackageFormat, Subtype
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify, split_csv


class DroidExporter(DialectExporter):
    """Render a package as a Factory skill, slash command or droid.

    ``argument-hint`` and ``allowed-tools`` come from export options or from
    a previous Droid import.
    """

    format = PackageFormat.DROID
    description_in_frontmatter = True

    def frontmatter(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> dict[str, Any]:
        stored = self.side_channel(package)
        configured = options.droid

        data: dict[str, Any] = {
            "name": collapse_lines(package.title),
            "description": collapse_lines(package.display_description),
        }

        hint = (configured.argument_hint if configured else None) or stored.get("argument-hint")
        if hint:
            data["argument-hint"] = hint

        allowed = list(configured.allowed_tools) if configured and configured.allowed_tools else []
        allowed = allowed or split_csv(stored.get("allowed-tools"))
        if allowed:
            data["allowed-tools"] = allowed
        return data

    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        slug = slugify(package.name)
        match package.subtype:
            case Subtype.SLASH_COMMAND:
                return f".factory/commands/{slug}.md"
            case Subtype.SKILL:
                return f".factory/skills/{slug}/SKILL.md"
            case _:
                return f".factory/droids/{slug}.md"
