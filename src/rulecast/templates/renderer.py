"""Batch report renderer.

Renders a BatchReport to markdown using Jinja2 templates. Output is
deterministic: the same report always renders to the same text.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateNotFound, select_autoescape

from rulecast.exporters import DISPLAY_NAMES
from rulecast.pipeline import BatchReport

logger = logging.getLogger(__name__)


def format_score(score: float | int | None) -> str:
    """Format a quality score for display ("87/100", "N/A")."""
    if score is None:
        return "N/A"
    if isinstance(score, float) and not score.is_integer():
        return f"{score:.1f}/100"
    return f"{int(score)}/100"


def format_datetime(dt: datetime | str | None) -> str:
    """Format datetime for display in reports.

    Args:
        dt: Datetime object or ISO string

    Returns:
        Formatted date string
    """
    if dt is None:
        return "N/A"

    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt)
        except ValueError:
            return dt

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def display_name(dialect: str) -> str:
    return DISPLAY_NAMES.get(dialect, dialect)


class ReportRenderer:
    """Renders batch conversion reports to markdown.

    Usage:
        renderer = ReportRenderer()
        markdown = renderer.render(batch_report)
    """

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("rulecast", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["format_score"] = format_score
        self._env.filters["format_datetime"] = format_datetime
        self._env.filters["display_name"] = display_name

    def render(self, report: BatchReport, template_name: str = "report.md.j2") -> str:
        """Render a batch report.

        Args:
            report: Batch report from the pipeline
            template_name: Template file to use

        Returns:
            Rendered markdown string

        Raises:
            ValueError: If the template is missing
        """
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as e:
            logger.error("Failed to load template %s: %s", template_name, e)
            raise ValueError(f"Template not found: {template_name}") from e

        rendered = template.render(**self._build_context(report))
        logger.info("Rendered batch report (%d characters)", len(rendered))
        return rendered

    def _build_context(self, report: BatchReport) -> dict[str, Any]:
        by_target: dict[str, list[Any]] = {target: [] for target in report.targets}
        for entry in report.entries:
            by_target.setdefault(entry.target, []).append(entry)

        target_scores = {
            target: (
                sum(e.outcome.result.quality_score for e in entries) / len(entries)
                if entries
                else None
            )
            for target, entries in by_target.items()
        }

        return {
            "report": report,
            "summary": report.summary(),
            "by_target": by_target,
            "target_scores": target_scores,
            "warned_entries": [e for e in report.entries if e.outcome.result.warnings],
        }
