"""Zencoder rule exporter (``.zencoder/rules/*.md``).

Frontmatter is written only when the rule is scoped: export options or a
previous Zencoder import supply ``globs`` or ``alwaysApply``. Otherwise
the description stays in the body.
"""

from typing import Any

from rulecast.exporters.base import DialectExporter, ExportReport, collapse_lines
from rulecast.models.canonical import CanonicalPackage, PackageFormat
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify, split_csv


class ZencoderExporter(DialectExporter):
    """Render a package as a Zencoder rule."""

    format = PackageFormat.ZENCODER

    def frontmatter(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> dict[str, Any]:
        stored = self.side_channel(package)
        configured = options.zencoder

        globs = list(configured.globs) if configured and configured.globs else split_csv(stored.get("globs"))
        if configured and configured.always_apply is not None:
            always_apply: bool | None = configured.always_apply
        elif "alwaysApply" in stored:
            always_apply = bool(stored["alwaysApply"])
        else:
            always_apply = None

        if not globs and always_apply is None:
            return {}

        data: dict[str, Any] = {}
        description = collapse_lines(package.display_description)
        if description:
            data["description"] = description
        if globs:
            data["globs"] = globs
        if always_apply is not None:
            data["alwaysApply"] = always_apply
        return data

    def suggest_filename(self, package: CanonicalPackage, options: ExportOptions | None = None) -> str:
        return f".zencoder/rules/{slugify(package.name)}.md"
