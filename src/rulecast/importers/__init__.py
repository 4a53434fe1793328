"""Dialect importers: dialect text to CanonicalPackage.

Each importer implements DialectImporter.import_document and raises a
StructuralRequirementError when the dialect's mandatory structure is absent.
"""

from rulecast.importers.base import (
    DialectImporter,
    FormatError,
    InvalidFieldError,
    MalformedDocumentError,
    MalformedFrontmatterError,
    MissingFieldError,
    MissingFrontmatterError,
    StructuralRequirementError,
)
from rulecast.importers.claude import ClaudeImporter, parse_persona
from rulecast.importers.continue_rules import ContinueImporter
from rulecast.importers.copilot import CopilotImporter
from rulecast.importers.cursor import CursorImporter
from rulecast.importers.droid import DroidImporter
from rulecast.importers.frontmatter import ParsedDocument, parse_frontmatter
from rulecast.importers.gemini import GeminiImporter
from rulecast.importers.inference import infer_section_type, infer_tags
from rulecast.importers.kiro import KiroImporter
from rulecast.importers.kiro_agent import KiroAgentImporter
from rulecast.importers.markdown import MarkdownSegmenter, SegmentedDocument
from rulecast.importers.passthrough import PassthroughImporter
from rulecast.importers.plain import (
    AgentsMdImporter,
    AiderImporter,
    TraeImporter,
    WindsurfImporter,
)
from rulecast.importers.ruler import RulerImporter
from rulecast.importers.structured import StructuredImporter
from rulecast.importers.zencoder import ZencoderImporter

__all__ = [
    # Base
    "DialectImporter",
    "StructuredImporter",
    # Errors
    "FormatError",
    "InvalidFieldError",
    "MalformedDocumentError",
    "MalformedFrontmatterError",
    "MissingFieldError",
    "MissingFrontmatterError",
    "StructuralRequirementError",
    # Parsing
    "MarkdownSegmenter",
    "ParsedDocument",
    "SegmentedDocument",
    "infer_section_type",
    "infer_tags",
    "parse_frontmatter",
    "parse_persona",
    # Dialects
    "AgentsMdImporter",
    "AiderImporter",
    "ClaudeImporter",
    "ContinueImporter",
    "CopilotImporter",
    "CursorImporter",
    "DroidImporter",
    "GeminiImporter",
    "KiroAgentImporter",
    "KiroImporter",
    "PassthroughImporter",
    "RulerImporter",
    "TraeImporter",
    "WindsurfImporter",
    "ZencoderImporter",
]
