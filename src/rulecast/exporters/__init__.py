"""Dialect exporters: CanonicalPackage to dialect text plus a quality report."""

from rulecast.exporters.base import (
    DISPLAY_NAMES,
    ConversionError,
    DialectExporter,
    ExportReport,
)
from rulecast.exporters.claude import ClaudeExporter
from rulecast.exporters.continue_rules import ContinueExporter
from rulecast.exporters.copilot import CopilotExporter
from rulecast.exporters.cursor import CursorExporter
from rulecast.exporters.droid import DroidExporter
from rulecast.exporters.gemini import GeminiExporter
from rulecast.exporters.kiro import KiroExporter
from rulecast.exporters.kiro_agent import KiroAgentExporter
from rulecast.exporters.plain import (
    AgentsMdExporter,
    AiderExporter,
    TraeExporter,
    WindsurfExporter,
)
from rulecast.exporters.ruler import RulerExporter
from rulecast.exporters.zencoder import ZencoderExporter

__all__ = [
    "DISPLAY_NAMES",
    "ConversionError",
    "DialectExporter",
    "ExportReport",
    "AgentsMdExporter",
    "AiderExporter",
    "ClaudeExporter",
    "ContinueExporter",
    "CopilotExporter",
    "CursorExporter",
    "DroidExporter",
    "GeminiExporter",
    "KiroAgentExporter",
    "KiroExporter",
    "RulerExporter",
    "TraeExporter",
    "WindsurfExporter",
    "ZencoderExporter",
]
