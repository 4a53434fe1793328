"""Unit tests for DialectRegistry."""

import pytest

from rulecast.exporters import DialectExporter, KiroExporter, WindsurfExporter
from rulecast.heuristics import ScoringPolicy, SectionHeuristics
from rulecast.importers import CursorImporter, DialectImporter, PassthroughImporter
from rulecast.models.canonical import CanonicalPackage, PackageFormat, SourceMetadata
from rulecast.models.conversion import ExportOptions
from rulecast.registry import (
    DialectRegistry,
    UnknownDialectError,
    get_registry,
    reset_registry,
    setup_default_dialects,
)

ALL_DIALECTS = [
    "agents.md",
    "aider",
    "claude",
    "continue",
    "copilot",
    "cursor",
    "droid",
    "gemini",
    "generic",
    "kiro",
    "kiro-agent",
    "ruler",
    "trae",
    "windsurf",
    "zencoder",
]


class UpperCaseExporter(DialectExporter):
    """Mock exporter for testing registration."""

    format = PackageFormat.GENERIC

    def render(self, package: CanonicalPackage, options: ExportOptions, report) -> str:
        return package.title.upper()

    def suggest_filename(self, package: CanonicalPackage, options: ExportOptions | None = None) -> str:
        return "OUT.md"


class TestDialectRegistry:
    """Tests for DialectRegistry class."""

    def test_register_and_get_importer(self) -> None:
        """Test registering and retrieving an importer."""
        registry = DialectRegistry()
        registry.register_importer("cursor", CursorImporter)

        importer = registry.get_importer("cursor")

        assert isinstance(importer, CursorImporter)
        assert isinstance(importer, DialectImporter)

    def test_register_and_get_exporter(self) -> None:
        """Test registering and retrieving a custom exporter."""
        registry = DialectRegistry()
        registry.register_exporter("shout", UpperCaseExporter)

        package = CanonicalPackage.from_dict(
            {"id": "a", "name": "quiet", "format": "generic", "subtype": "rule"}
        )
        result = registry.get_exporter("shout").export(package)

        assert result.content == "QUIET"
        assert registry.list_exporters() == ["shout"]

    def test_unknown_importer(self) -> None:
        """Test unknown dialects raise with the available names."""
        registry = DialectRegistry()
        registry.register_importer("cursor", CursorImporter)

        with pytest.raises(UnknownDialectError) as exc_info:
            registry.get_importer("notepad")

        assert exc_info.value.direction == "importer"
        assert exc_info.value.available == ["cursor"]
        assert str(exc_info.value) == "No importer registered for dialect 'notepad'. Available: cursor"

    def test_unknown_exporter(self) -> None:
        """Test export of an import-only dialect is rejected."""
        registry = setup_default_dialects(DialectRegistry())

        with pytest.raises(UnknownDialectError, match="No exporter registered for dialect 'generic'"):
            registry.get_exporter("generic")

    def test_heuristics_passed_to_importers(self) -> None:
        """Test importers receive the registry's inference tables."""
        heuristics = SectionHeuristics(lookahead=1)
        registry = DialectRegistry(heuristics=heuristics)
        registry.register_importer("cursor", CursorImporter)

        assert registry.get_importer("cursor").heuristics is heuristics

    def test_scoring_passed_to_exporters(self) -> None:
        """Test exporters receive the registry's scoring policy."""
        scoring = ScoringPolicy(skipped_section_penalty=25)
        registry = DialectRegistry(scoring=scoring)
        registry.register_exporter("kiro", KiroExporter)

        assert registry.get_exporter("kiro").scoring is scoring

    def test_get_returns_fresh_instances(self) -> None:
        """Test each lookup builds a new stateless instance."""
        registry = setup_default_dialects(DialectRegistry())

        assert registry.get_exporter("windsurf") is not registry.get_exporter("windsurf")

    def test_get_metadata(self) -> None:
        """Test getting registry metadata."""
        registry = DialectRegistry(scoring=ScoringPolicy(lossy_penalty=5))
        registry.register_importer("generic", PassthroughImporter)

        metadata = registry.get_metadata()

        assert metadata["importers"] == ["generic"]
        assert metadata["exporters"] == []
        assert metadata["lookahead"] == 4
        assert metadata["lossy_penalty"] == 5
        assert metadata["validation_error_penalty"] == 5


class TestDefaultDialects:
    """Tests for the built-in dialect set."""

    def test_every_dialect_importable(self) -> None:
        """Test all ten dialects have importers."""
        registry = setup_default_dialects(DialectRegistry())

        assert registry.list_importers() == ALL_DIALECTS
        assert registry.list_dialects() == ALL_DIALECTS

    def test_every_dialect_but_generic_exportable(self) -> None:
        """Test generic is import-only."""
        registry = setup_default_dialects(DialectRegistry())

        assert registry.list_exporters() == [d for d in ALL_DIALECTS if d != "generic"]
        assert registry.capabilities()["generic"] == {"import": True, "export": False}
        assert registry.capabilities()["kiro"] == {"import": True, "export": True}

    def test_importer_and_exporter_formats_match_names(self) -> None:
        """Test each registered class declares the dialect it is registered under."""
        registry = setup_default_dialects(DialectRegistry())

        for name in registry.list_importers():
            assert registry.get_importer(name).dialect == name
        for name in registry.list_exporters():
            assert registry.get_exporter(name).dialect == name


class TestGlobalRegistry:
    """Tests for the process-wide registry."""

    def test_get_registry_is_cached(self) -> None:
        """Test the same instance is returned until reset."""
        registry = get_registry()

        assert get_registry() is registry
        assert isinstance(registry.get_exporter("windsurf"), WindsurfExporter)

    def test_reset_registry(self) -> None:
        """Test reset drops custom registrations."""
        get_registry().register_exporter("shout", UpperCaseExporter)

        reset_registry()

        assert "shout" not in get_registry().list_exporters()

    def test_registry_is_usable_end_to_end(self) -> None:
        """Test an import and export through the global registry."""
        registry = get_registry()
        package = registry.get_importer("generic").import_document(
            "Be kind.", SourceMetadata(id="kind", name="kind")
        )

        result = registry.get_exporter("agents.md").export(package)

        assert result.content == "# kind\n\n## Instructions\n\nBe kind.\n"
