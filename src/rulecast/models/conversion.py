"""Conversion result and per-dialect export options."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from rulecast.utils.text import split_csv


class InclusionMode(Enum):
    """Kiro steering inclusion modes."""

    ALWAYS = "always"
    MANUAL = "manual"
    FILE_MATCH = "fileMatch"


INCLUSION_MODES = tuple(mode.value for mode in InclusionMode)


@dataclass
class ConversionResult:
    """Outcome of exporting one canonical package to one dialect.

    Attributes:
        content: Dialect text ready to be written to the suggested filename
        format: Target dialect name
        warnings: Human-readable advisories and loss reports
        lossy_conversion: True if canonical content was dropped
        quality_score: Fidelity estimate from 0 to 100
        validation_errors: Output schema violations found after rendering
    """

    content: str
    format: str
    warnings: list[str] = field(default_factory=list)
    lossy_conversion: bool = False
    quality_score: int = 100
    validation_errors: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 <= self.quality_score <= 100:
            raise ValueError(f"Quality score must be between 0 and 100 (got {self.quality_score})")

    @classmethod
    def failed(cls, format: str, message: str) -> "ConversionResult":
        """Build the empty, zero-quality result for a conversion that could not run."""
        return cls(
            content="",
            format=format,
            warnings=[message],
            lossy_conversion=True,
            quality_score=0,
        )

    @property
    def succeeded(self) -> bool:
        """Return True if content was produced."""
        return bool(self.content)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "content": self.content,
            "format": self.format,
            "warnings": list(self.warnings),
            "lossyConversion": self.lossy_conversion,
            "qualityScore": self.quality_score,
            "validationErrors": list(self.validation_errors),
        }


@dataclass(frozen=True)
class KiroOptions:
    """Structural metadata required to emit a Kiro steering file.

    Attributes:
        inclusion: always, manual or fileMatch
        file_match_pattern: Glob used when inclusion is fileMatch
        domain: Optional steering domain
        filename: Optional filename stem override
    """

    inclusion: str | None = None
    file_match_pattern: str | None = None
    domain: str | None = None
    filename: str | None = None

    def __post_init__(self) -> None:
        if self.inclusion is not None and self.inclusion not in INCLUSION_MODES:
            raise ValueError(
                f"Invalid Kiro inclusion mode: {self.inclusion}. Valid: {list(INCLUSION_MODES)}"
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "KiroOptions":
        """Build from a config mapping (snake_case or Kiro camelCase keys)."""
        return cls(
            inclusion=data.get("inclusion"),
            file_match_pattern=data.get("file_match_pattern") or data.get("fileMatchPattern"),
            domain=data.get("domain"),
            filename=data.get("filename"),
        )


@dataclass(frozen=True)
class CopilotOptions:
    """Copilot export settings.

    Attributes:
        apply_to: Glob patterns for a path-specific instructions file
        instruction_name: Filename stem for ``.instructions.md`` files
    """

    apply_to: tuple[str, ...] = ()
    instruction_name: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CopilotOptions":
        """Build from a config mapping."""
        return cls(
            apply_to=tuple(split_csv(data.get("apply_to") or data.get("applyTo"))),
            instruction_name=data.get("instruction_name"),
        )


@dataclass(frozen=True)
class CursorOptions:
    """Cursor rule frontmatter settings."""

    globs: tuple[str, ...] = ()
    always_apply: bool | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CursorOptions":
        """Build from a config mapping."""
        always_apply = data.get("always_apply", data.get("alwaysApply"))
        return cls(
            globs=tuple(split_csv(data.get("globs"))),
            always_apply=None if always_apply is None else bool(always_apply),
        )


@dataclass(frozen=True)
class DroidOptions:
    """Factory Droid frontmatter settings."""

    argument_hint: str | None = None
    allowed_tools: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DroidOptions":
        """Build from a config mapping."""
        return cls(
            argument_hint=data.get("argument_hint") or data.get("argument-hint"),
            allowed_tools=tuple(split_csv(data.get("allowed_tools") or data.get("allowed-tools"))),
        )


@dataclass(frozen=True)
class ZencoderOptions:
    """Zencoder rule frontmatter settings."""

    globs: tuple[str, ...] = ()
    always_apply: bool | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ZencoderOptions":
        """Build from a config mapping."""
        always_apply = data.get("always_apply", data.get("alwaysApply"))
        return cls(
            globs=tuple(split_csv(data.get("globs"))),
            always_apply=None if always_apply is None else bool(always_apply),
        )


@dataclass(frozen=True)
class ExportOptions:
    """Per-call export settings; each field applies to one dialect.

    Explicit options take precedence over side-channel metadata carried in
    the package.
    """

    kiro: KiroOptions | None = None
    copilot: CopilotOptions | None = None
    cursor: CursorOptions | None = None
    droid: DroidOptions | None = None
    zencoder: ZencoderOptions | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ExportOptions":
        """Build from the ``dialects`` section of a config file."""
        data = data or {}
        return cls(
            kiro=KiroOptions.from_mapping(data["kiro"]) if data.get("kiro") else None,
            copilot=CopilotOptions.from_mapping(data["copilot"]) if data.get("copilot") else None,
            cursor=CursorOptions.from_mapping(data["cursor"]) if data.get("cursor") else None,
            droid=DroidOptions.from_mapping(data["droid"]) if data.get("droid") else None,
            zencoder=ZencoderOptions.from_mapping(data["zencoder"]) if data.get("zencoder") else None,
        )
