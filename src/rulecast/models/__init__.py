"""Rulecast data models.

- canonical: CanonicalPackage and its section variants
- conversion: ConversionResult and per-dialect ExportOptions
"""

from rulecast.models.canonical import (
    CanonicalPackage,
    PackageFormat,
    SourceMetadata,
    Subtype,
)
from rulecast.models.conversion import (
    ConversionResult,
    CopilotOptions,
    CursorOptions,
    DroidOptions,
    ExportOptions,
    InclusionMode,
    KiroOptions,
    ZencoderOptions,
)

__all__ = [
    "CanonicalPackage",
    "PackageFormat",
    "SourceMetadata",
    "Subtype",
    "ConversionResult",
    "CopilotOptions",
    "CursorOptions",
    "DroidOptions",
    "ExportOptions",
    "InclusionMode",
    "KiroOptions",
    "ZencoderOptions",
]
