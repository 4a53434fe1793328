"""Continue rules and prompts exporter.

Slash commands and prompts become invokable prompts under
``.continue/prompts``; everything else is a rule under ``.continue/rules``
whose ``globs``, ``regex`` and ``alwaysApply`` come from a previous
Continue import.
"""

from typing import Any

from rulecast.exporters.base import DialectExporter, ExportReport, collapse_lines
from rulecast.models.canonical import CanonicalPackage, PackageFormat, Subtype
from rulecast.models.conversion import ExportOptions
from rulecast.utils.text import slugify, split_csv

PROMPT_SUBTYPES = frozenset({Subtype.SLASH_COMMAND, Subtype.PROMPT})


class ContinueExporter(DialectExporter):
    """Render a package as a Continue rule or prompt."""

    format = PackageFormat.CONTINUE
    description_in_frontmatter = True

    def frontmatter(
        self,
        package: CanonicalPackage,
        options: ExportOptions,
        report: ExportReport,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {"name": collapse_lines(package.title)}
        description = collapse_lines(package.display_description)
        if description:
            data["description"] = description

        if package.subtype in PROMPT_SUBTYPES:
            data["invokable"] = True
            return data

        stored = self.side_channel(package)
        globs = split_csv(stored.get("globs"))
        if globs:
            data["globs"] = globs[0] if len(globs) == 1 else globs
        if stored.get("regex"):
            data["regex"] = stored["regex"]
        if "alwaysApply" in stored:
            data["alwaysApply"] = bool(stored["alwaysApply"])
        return data

    def render_title(self, package: CanonicalPackage) -> str:
        title = collapse_lines(package.title)
        meta = package.metadata_section
        if meta is not None and meta.icon:
            return f"{meta.icon} {title}"
        return title

    def suggest_filename(
        self,
        package: CanonicalPackage,
        options: ExportOptions | None = None,
    ) -> str:
        slug = slugify(package.name)
        if package.subtype in PROMPT_SUBTYPES:
            return f".continue/prompts/{slug}.md"
        return f".continue/rules/{slug}.md"
