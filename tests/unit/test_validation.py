"""Unit tests for schema validation of rendered output."""

import json
from typing import Any

import pytest

from rulecast.exporters import CursorExporter, ExportReport
from rulecast.models.canonical import CanonicalPackage
from rulecast.models.conversion import ExportOptions
from rulecast.validation import (
    FORMAT_SCHEMAS,
    SUBTYPE_SCHEMAS,
    ValidationIssue,
    ValidationResult,
    format_validation_errors,
    load_validator,
    schema_name,
    validate_output,
)


class TestSchemaSelection:
    """Tests for choosing a schema by dialect and subtype."""

    def test_subtype_schema_wins(self) -> None:
        assert schema_name("claude", "skill") == "claude-skill"
        assert schema_name("claude", "rule") == "claude"

    def test_dialect_schema(self) -> None:
        assert schema_name("kiro", "rule") == "kiro-steering"
        assert schema_name("kiro-agent") == "kiro-agent"

    def test_dialect_without_schema(self) -> None:
        """Test unchecked dialects always validate."""
        assert schema_name("droid", "agent") is None
        assert validate_output("droid", "anything").valid

    @pytest.mark.parametrize("name", sorted(set(FORMAT_SCHEMAS.values()) | set(SUBTYPE_SCHEMAS.values())))
    def test_packaged_schemas_load(self, name: str) -> None:
        """Test every referenced schema ships and is itself a valid schema."""
        assert load_validator(name) is not None


class TestMarkdownOutput:
    """Tests for frontmatter dialects."""

    def test_valid_cursor_rule(self) -> None:
        result = validate_output("cursor", "---\ndescription: Style\nalwaysApply: false\n---\n\n# Style\n")

        assert result.valid
        assert result.schema == "cursor"

    def test_file_match_requires_pattern(self) -> None:
        """Test the conditional requirement of Kiro steering files."""
        result = validate_output("kiro", "---\ninclusion: fileMatch\n---\n\n# Style\n")

        assert result.messages == ["/frontmatter: 'fileMatchPattern' is a required property"]

    def test_missing_inclusion_reported_once(self) -> None:
        result = validate_output("kiro", "---\ndomain: api\n---\n\n# Style\n")

        assert result.messages == ["/frontmatter: 'inclusion' is a required property"]

    def test_skill_name_pattern(self) -> None:
        """Test skill names must be lowercase and hyphenated."""
        result = validate_output("claude", "---\nname: Code Reviewer\ndescription: d\n---\n\n# T\n", "skill")

        assert [error.path for error in result.errors] == ["/frontmatter/name"]

    def test_unparseable_frontmatter(self) -> None:
        result = validate_output("cursor", "---\ndescription: [unclosed\n---\n\n# T\n")

        assert len(result.errors) == 1
        assert result.errors[0].path == "/"
        assert result.messages[0].startswith("/: invalid frontmatter")

    def test_frontmatter_must_be_mapping(self) -> None:
        result = validate_output("cursor", "---\n- a\n- b\n---\n\n# T\n")

        assert result.messages == ["/: frontmatter is not a mapping"]

    def test_plain_dialect_needs_content(self) -> None:
        assert not validate_output("windsurf", "").valid
        assert validate_output("windsurf", "# Rules\n").valid


class TestStructuredOutput:
    """Tests for the TOML and JSON dialects."""

    def test_gemini_requires_prompt(self) -> None:
        result = validate_output("gemini", 'description = "Review code"\n')

        assert result.messages == ["/: 'prompt' is a required property"]

    def test_invalid_toml(self) -> None:
        result = validate_output("gemini", 'prompt = """never closed\n')

        assert len(result.errors) == 1
        assert result.messages[0].startswith("/: invalid TOML")

    def test_kiro_agent_server_needs_command(self) -> None:
        """Test nested errors carry a JSON pointer to the offending value."""
        config: dict[str, Any] = {"name": "reviewer", "mcpServers": {"git": {"args": ["serve"]}}}

        result = validate_output("kiro-agent", json.dumps(config))

        assert result.messages == ["/mcpServers/git: 'command' is a required property"]

    def test_kiro_agent_needs_name_or_description(self) -> None:
        assert not validate_output("kiro-agent", '{"prompt": "Review code"}').valid
        assert validate_output("kiro-agent", '{"description": "Reviews code"}').valid

    def test_invalid_json(self) -> None:
        result = validate_output("kiro-agent", "{name: reviewer}")

        assert result.messages[0].startswith("/: invalid JSON")


class TestExportScoring:
    """Tests for schema violations reaching conversion results."""

    def test_violations_reported_and_scored(self, rich_package: CanonicalPackage) -> None:
        """Test each violation is listed and costs points without a warning."""

        class DescriptionOnlyExporter(CursorExporter):
            def frontmatter(
                self,
                package: CanonicalPackage,
                options: ExportOptions,
                report: ExportReport,
            ) -> dict[str, Any]:
                return {"description": package.display_description}

        result = DescriptionOnlyExporter().export(rich_package)

        assert result.validation_errors == ["/frontmatter: 'alwaysApply' is a required property"]
        assert result.warnings == []
        assert result.quality_score == 95

    def test_valid_export_has_no_errors(self, rich_package: CanonicalPackage) -> None:
        assert CursorExporter().export(rich_package).validation_errors == []


class TestFormatting:
    """Tests for the human-readable error listing."""

    def test_format_errors(self) -> None:
        result = ValidationResult(
            errors=[
                ValidationIssue(path="/", message="/: 'prompt' is a required property"),
                ValidationIssue(path="/description", message="/description: 3 is not of type 'string'"),
            ],
            schema="gemini",
        )

        assert format_validation_errors(result) == (
            "Validation Errors:\n"
            "  - /: 'prompt' is a required property\n"
            "  - /description: 3 is not of type 'string'"
        )

    def test_valid_result_formats_empty(self) -> None:
        assert format_validation_errors(ValidationResult()) == ""
