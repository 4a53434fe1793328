"""Dialect registry for pluggable importers and exporters.

The registry maps a dialect name to its importer and exporter classes.
Adding a dialect:
    1. Implement DialectImporter and/or DialectExporter
    2. Register the classes under the dialect name
    3. No changes needed to the pipeline or CLI
"""

from typing import Any

from rulecast.exporters import (
    AgentsMdExporter,
    AiderExporter,
    ClaudeExporter,
    ContinueExporter,
    CopilotExporter,
    CursorExporter,
    DialectExporter,
    DroidExporter,
    GeminiExporter,
    KiroAgentExporter,
    KiroExporter,
    RulerExporter,
    TraeExporter,
    WindsurfExporter,
    ZencoderExporter,
)
from rulecast.heuristics import (
    DEFAULT_HEURISTICS,
    DEFAULT_SCORING,
    ScoringPolicy,
    SectionHeuristics,
)
from rulecast.importers import (
    AgentsMdImporter,
    AiderImporter,
    ClaudeImporter,
    ContinueImporter,
    CopilotImporter,
    CursorImporter,
    DialectImporter,
    DroidImporter,
    GeminiImporter,
    KiroAgentImporter,
    KiroImporter,
    PassthroughImporter,
    RulerImporter,
    TraeImporter,
    WindsurfImporter,
    ZencoderImporter,
)
from rulecast.models.canonical import PackageFormat


class UnknownDialectError(Exception):
    """Raised when a dialect name is not registered for the requested direction."""

    def __init__(self, dialect: str, direction: str, available: list[str]) -> None:
        self.dialect = dialect
        self.direction = direction
        self.available = available
        super().__init__(
            f"No {direction} registered for dialect '{dialect}'. Available: {', '.join(available)}"
        )


class DialectRegistry:
    """Registry of importer and exporter classes by dialect name.

    Attributes:
        heuristics: Section inference tables passed to every importer
        scoring: Penalty policy passed to every exporter
    """

    def __init__(
        self,
        heuristics: SectionHeuristics = DEFAULT_HEURISTICS,
        scoring: ScoringPolicy = DEFAULT_SCORING,
    ) -> None:
        """Initialize an empty registry."""
        self.heuristics = heuristics
        self.scoring = scoring
        self._importers: dict[str, type[DialectImporter]] = {}
        self._exporters: dict[str, type[DialectExporter]] = {}

    # =========================================================================
    # Registration
    # =========================================================================

    def register_importer(self, name: str, importer_class: type[DialectImporter]) -> None:
        """Register an importer class under a dialect name."""
        self._importers[name] = importer_class

    def register_exporter(self, name: str, exporter_class: type[DialectExporter]) -> None:
        """Register an exporter class under a dialect name."""
        self._exporters[name] = exporter_class

    # =========================================================================
    # Retrieval
    # =========================================================================

    def get_importer(self, name: str) -> DialectImporter:
        """Get an importer instance.

        Args:
            name: Dialect name (e.g., "cursor")

        Returns:
            Importer configured with the registry's heuristics

        Raises:
            UnknownDialectError: If no importer is registered for the dialect
        """
        if name not in self._importers:
            raise UnknownDialectError(name, "importer", self.list_importers())
        return self._importers[name](self.heuristics)

    def get_exporter(self, name: str) -> DialectExporter:
        """Get an exporter instance.

        Args:
            name: Dialect name (e.g., "kiro")

        Returns:
            Exporter configured with the registry's scoring policy

        Raises:
            UnknownDialectError: If no exporter is registered for the dialect
        """
        if name not in self._exporters:
            raise UnknownDialectError(name, "exporter", self.list_exporters())
        return self._exporters[name](self.scoring)

    # =========================================================================
    # Introspection
    # =========================================================================

    def list_importers(self) -> list[str]:
        """Get sorted list of dialects that can be imported."""
        return sorted(self._importers)

    def list_exporters(self) -> list[str]:
        """Get sorted list of dialects that can be exported."""
        return sorted(self._exporters)

    def list_dialects(self) -> list[str]:
        """Get sorted list of every registered dialect."""
        return sorted(set(self._importers) | set(self._exporters))

    def capabilities(self) -> dict[str, dict[str, bool]]:
        """Get import/export capability per dialect.

        Returns:
            Dictionary mapping dialect → {"import": bool, "export": bool}
        """
        return {
            name: {"import": name in self._importers, "export": name in self._exporters}
            for name in self.list_dialects()
        }

    def get_metadata(self) -> dict[str, Any]:
        """Get registry metadata for logging and debugging."""
        return {
            "importers": self.list_importers(),
            "exporters": self.list_exporters(),
            "lookahead": self.heuristics.lookahead,
            "skipped_section_penalty": self.scoring.skipped_section_penalty,
            "lossy_penalty": self.scoring.lossy_penalty,
            "validation_error_penalty": self.scoring.validation_error_penalty,
        }


_BUILTIN_IMPORTERS: dict[PackageFormat, type[DialectImporter]] = {
    PackageFormat.CURSOR: CursorImporter,
    PackageFormat.CLAUDE: ClaudeImporter,
    PackageFormat.COPILOT: CopilotImporter,
    PackageFormat.KIRO: KiroImporter,
    PackageFormat.WINDSURF: WindsurfImporter,
    PackageFormat.AGENTS_MD: AgentsMdImporter,
    PackageFormat.TRAE: TraeImporter,
    PackageFormat.DROID: DroidImporter,
    PackageFormat.AIDER: AiderImporter,
    PackageFormat.GEMINI: GeminiImporter,
    PackageFormat.CONTINUE: ContinueImporter,
    PackageFormat.RULER: RulerImporter,
    PackageFormat.ZENCODER: ZencoderImporter,
    PackageFormat.KIRO_AGENT: KiroAgentImporter,
    PackageFormat.GENERIC: PassthroughImporter,
}

_BUILTIN_EXPORTERS: dict[PackageFormat, type[DialectExporter]] = {
    PackageFormat.CURSOR: CursorExporter,
    PackageFormat.CLAUDE: ClaudeExporter,
    PackageFormat.COPILOT: CopilotExporter,
    PackageFormat.KIRO: KiroExporter,
    PackageFormat.WINDSURF: WindsurfExporter,
    PackageFormat.AGENTS_MD: AgentsMdExporter,
    PackageFormat.TRAE: TraeExporter,
    PackageFormat.DROID: DroidExporter,
    PackageFormat.AIDER: AiderExporter,
    PackageFormat.GEMINI: GeminiExporter,
    PackageFormat.CONTINUE: ContinueExporter,
    PackageFormat.RULER: RulerExporter,
    PackageFormat.ZENCODER: ZencoderExporter,
    PackageFormat.KIRO_AGENT: KiroAgentExporter,
}


def setup_default_dialects(registry: DialectRegistry) -> DialectRegistry:
    """Register every built-in dialect on a registry.

    Args:
        registry: Registry to populate

    Returns:
        The same registry, for chaining
    """
    for fmt, importer_class in _BUILTIN_IMPORTERS.items():
        registry.register_importer(fmt.value, importer_class)
    for fmt, exporter_class in _BUILTIN_EXPORTERS.items():
        registry.register_exporter(fmt.value, exporter_class)
    return registry


# Global registry instance
_registry: DialectRegistry | None = None


def get_registry() -> DialectRegistry:
    """Get the global dialect registry with built-in dialects registered.

    Returns:
        Global DialectRegistry instance
    """
    global _registry
    if _registry is None:
        _registry = setup_default_dialects(DialectRegistry())
    return _registry


def reset_registry() -> None:
    """Reset the global registry (primarily for testing)."""
    global _registry
    _registry = None
