"""Shared pytest fixtures for rulecast tests.

Fixtures are organized by category:
- Path fixtures: dialect documents under tests/fixtures/documents
- Source fixtures: SourceMetadata factories
- Package fixtures: canonical packages built directly from sections
- Configuration fixtures: config dictionaries for various scenarios
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from rulecast.models.canonical import (
    CanonicalContent,
    CanonicalPackage,
    ContextSection,
    Example,
    ExamplesSection,
    InstructionsSection,
    MetadataSection,
    PackageFormat,
    PersonaSection,
    Rule,
    RulesSection,
    SourceMetadata,
    Subtype,
    Taxonomy,
    ToolsSection,
)
from rulecast.registry import reset_registry

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def documents_dir(fixtures_dir: Path) -> Path:
    """Return the path to the dialect document fixtures."""
    return fixtures_dir / "documents"


@pytest.fixture
def read_document(documents_dir: Path) -> Callable[[str], str]:
    """Return a reader for documents relative to the documents directory."""

    def _read(relative: str) -> str:
        return (documents_dir / relative).read_text(encoding="utf-8")

    return _read


# =============================================================================
# Source Fixtures
# =============================================================================


@pytest.fixture
def make_source() -> Callable[..., SourceMetadata]:
    """Return a SourceMetadata factory with test defaults."""

    def _make(name: str = "test-rules", **kwargs: Any) -> SourceMetadata:
        kwargs.setdefault("id", name)
        return SourceMetadata(name=name, **kwargs)

    return _make


# =============================================================================
# Package Fixtures
# =============================================================================


def build_package(
    *sections: Any,
    name: str = "sample",
    format: PackageFormat = PackageFormat.CURSOR,
    subtype: Subtype = Subtype.RULE,
    metadata: dict[str, dict[str, Any]] | None = None,
) -> CanonicalPackage:
    """Build a canonical package directly from sections."""
    return CanonicalPackage(
        id=name,
        name=name,
        version="1.0.0",
        author="",
        description="",
        tags=frozenset(),
        taxonomy=Taxonomy(format, subtype),
        content=CanonicalContent(sections=tuple(sections)),
        metadata=metadata or {},
    )


@pytest.fixture
def package_factory() -> Callable[..., CanonicalPackage]:
    """Return the build_package helper."""
    return build_package


@pytest.fixture
def rich_package() -> CanonicalPackage:
    """A package exercising every common section kind."""
    return build_package(
        MetadataSection(title="Python Style", description="Conventions for Python code"),
        InstructionsSection(title="Setup", content="Run the formatter before committing."),
        RulesSection(
            title="Coding Rules",
            items=(
                Rule(content="Use type hints", rationale="They document intent"),
                Rule(content="Prefer pathlib", examples=("Path('a') / 'b'",)),
            ),
        ),
        ExamplesSection(
            title="Examples",
            examples=(
                Example(description="Bare except", code="try:\n    x()\nexcept:\n    pass", language="python", good=False),
                Example(description="Specific except", code="try:\n    x()\nexcept KeyError:\n    pass", language="python", good=True),
            ),
        ),
        ContextSection(title="Background", content="The project targets Python 3.11."),
        name="python-style",
    )


@pytest.fixture
def agent_package() -> CanonicalPackage:
    """A Claude-style agent with tools and a persona."""
    return build_package(
        MetadataSection(title="Code Reviewer", description="Reviews pull requests", icon="🔍"),
        ToolsSection(tools=("Read", "Grep")),
        PersonaSection(role="meticulous senior code reviewer", name="Ada", style=("concise", "direct")),
        RulesSection(title="Review Guidelines", items=(Rule(content="Flag missing tests"),)),
        name="code-reviewer",
        format=PackageFormat.CLAUDE,
        subtype=Subtype.AGENT,
    )


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete rulecast configuration with all options."""
    return {
        "output": {"directory": "out", "default_format": "kiro"},
        "scoring": {"skipped_section_penalty": 15, "lossy_penalty": 5},
        "dialects": {
            "kiro": {"inclusion": "fileMatch", "file_match_pattern": "src/**/*.py", "domain": "python"},
            "copilot": {"apply_to": ["**/*.py"], "instruction_name": "python"},
            "cursor": {"globs": "src/**", "always_apply": True},
            "droid": {"argument_hint": "<file>", "allowed_tools": ["Read"]},
        },
        "batch": {"max_workers": 2, "pattern": "**/*.md"},
        "ci": {"fail_on_warning": True, "json_output": False},
    }


# =============================================================================
# Global State
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_registry() -> None:
    """Give every test a fresh global dialect registry."""
    reset_registry()
