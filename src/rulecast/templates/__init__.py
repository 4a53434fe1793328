"""Rulecast report rendering.

Jinja2-based rendering of batch conversion reports with deterministic output.
"""

from rulecast.templates.renderer import ReportRenderer, format_datetime, format_score

__all__ = ["ReportRenderer", "format_datetime", "format_score"]
