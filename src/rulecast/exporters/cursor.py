"""Cursor rules exporter (``.cursor/rules/*.mdc``)."""

from typing import Any

from rulecast.exporters.base import DialectExporter, ExportReport, collapse_lines
from rulecast.models.canonical import CanonicalPackage, PackageFormat
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify


class CursorExporter(DialectExporter):
    """Render a package as a Cursor ``.mdc`` rule.

    Frontmatter carries ``description``, optional ``globs`` and
    ``alwaysApply``; export options override values kept from a Cursor import.
    """

    format = PackageFormat.CURSOR
    description_in_frontmatter = True

    def frontmatter(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> dict[str, Any]:
        stored = self.side_channel(package)
        configured = options.cursor

        globs = list(configured.globs) if configured and configured.globs else stored.get("globs", [])
        if configured and configured.always_apply is not None:
            always_apply = configured.always_apply
        else:
            always_apply = bool(stored.get("alwaysApply", False))

        data: dict[str, Any] = {"description": collapse_lines(package.display_description)}
        if globs:
            data["globs"] = ", ".join(globs)
        data["alwaysApply"] = always_apply
        return data

    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        return f".cursor/rules/{slugify(package.name)}.mdc"
