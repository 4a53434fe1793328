"""Unit tests for taxonomy assignment, dialect detection and manifests."""

from typing import Any

import pytest

from rulecast.models.canonical import (
    CanonicalPackage,
    InstructionsSection,
    MetadataSection,
    PackageDraft,
    PackageFormat,
    SectionKind,
    Subtype,
)
from rulecast.taxonomy import (
    DialectMatch,
    assign_taxonomy,
    detect_dialect,
    detect_subtype_from_frontmatter,
    filter_packages,
    merge_package_fields,
    packages_with_inheritance,
    validate_manifest,
)


class TestAssignTaxonomy:
    """Tests for the single taxonomy assignment step."""

    def test_draft_becomes_package(self) -> None:
        """Test a draft is frozen into a package with the taxonomy."""
        draft = PackageDraft(id="a", name="a", sections=[InstructionsSection(title="A", content="b")])

        package = assign_taxonomy(draft, "kiro", "rule")

        assert isinstance(package, CanonicalPackage)
        assert package.format is PackageFormat.KIRO
        assert package.subtype is Subtype.RULE

    def test_empty_draft_gets_instructions(self) -> None:
        """Test a metadata-only draft receives an empty instructions section."""
        draft = PackageDraft(id="a", name="a", sections=[MetadataSection(title="A")])

        package = assign_taxonomy(draft, PackageFormat.CURSOR, Subtype.RULE)

        assert [s.kind for s in package.sections] == [SectionKind.METADATA, SectionKind.INSTRUCTIONS]

    def test_reassignment_is_idempotent(self, rich_package: CanonicalPackage) -> None:
        """Test assigning the same taxonomy again returns an equal package."""
        once = assign_taxonomy(rich_package, "cursor", "rule")

        assert assign_taxonomy(once, "cursor", "rule") == once

    def test_reassignment_changes_taxonomy(self, rich_package: CanonicalPackage) -> None:
        """Test a different pair produces a reclassified copy."""
        package = assign_taxonomy(rich_package, "claude", "skill")

        assert package.subtype is Subtype.SKILL
        assert package.sections == rich_package.sections

    def test_unknown_values_rejected(self) -> None:
        """Test unknown format or subtype raise ValueError."""
        draft = PackageDraft(id="a", name="a")
        with pytest.raises(ValueError):
            assign_taxonomy(draft, "notepad", "rule")
        with pytest.raises(ValueError):
            assign_taxonomy(draft, "cursor", "macro")


class TestDetectSubtype:
    """Tests for frontmatter subtype markers."""

    def test_explicit_subtype_wins(self) -> None:
        """Test the subtype key wins over legacy markers."""
        assert detect_subtype_from_frontmatter({"subtype": "skill", "agentType": "agent"}) is Subtype.SKILL

    @pytest.mark.parametrize(
        ("frontmatter", "expected"),
        [
            ({"agentType": "agent"}, Subtype.AGENT),
            ({"skillType": "skill"}, Subtype.SKILL),
            ({"commandType": "slash-command"}, Subtype.SLASH_COMMAND),
            ({}, Subtype.RULE),
        ],
    )
    def test_legacy_markers(self, frontmatter: dict[str, Any], expected: Subtype) -> None:
        """Test legacy single-purpose markers."""
        assert detect_subtype_from_frontmatter(frontmatter) is expected

    def test_unknown_explicit_value_falls_back(self) -> None:
        """Test an unrecognised subtype value uses the default."""
        assert detect_subtype_from_frontmatter({"subtype": "macro"}, default=Subtype.SKILL) is Subtype.SKILL


class TestDetectDialect:
    """Tests for path-based dialect recognition."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            (".cursorrules", DialectMatch(PackageFormat.CURSOR, Subtype.RULE)),
            ("project/.cursor/rules/react.mdc", DialectMatch(PackageFormat.CURSOR, Subtype.RULE)),
            ("CLAUDE.md", DialectMatch(PackageFormat.CLAUDE, Subtype.RULE)),
            (".claude/agents/reviewer.md", DialectMatch(PackageFormat.CLAUDE, Subtype.AGENT)),
            (".claude/skills/pdf/SKILL.md", DialectMatch(PackageFormat.CLAUDE, Subtype.SKILL)),
            (".github/copilot-instructions.md", DialectMatch(PackageFormat.COPILOT, Subtype.RULE)),
            ("docs/python.instructions.md", DialectMatch(PackageFormat.COPILOT, Subtype.RULE)),
            (".kiro/steering/tech.md", DialectMatch(PackageFormat.KIRO, Subtype.RULE)),
            (".windsurfrules", DialectMatch(PackageFormat.WINDSURF, Subtype.RULE)),
            ("AGENTS.md", DialectMatch(PackageFormat.AGENTS_MD, Subtype.RULE)),
            (".trae/rules/style.md", DialectMatch(PackageFormat.TRAE, Subtype.RULE)),
            (".factory/commands/review.md", DialectMatch(PackageFormat.DROID, Subtype.SLASH_COMMAND)),
            ("CONVENTIONS.md", DialectMatch(PackageFormat.AIDER, Subtype.RULE)),
            (".gemini/commands/review.toml", DialectMatch(PackageFormat.GEMINI, Subtype.SLASH_COMMAND)),
            (".continue/rules/react.md", DialectMatch(PackageFormat.CONTINUE, Subtype.RULE)),
            (".continue/prompts/explain.md", DialectMatch(PackageFormat.CONTINUE, Subtype.PROMPT)),
            (".ruler/style.md", DialectMatch(PackageFormat.RULER, Subtype.RULE)),
            (".zencoder/rules/api.md", DialectMatch(PackageFormat.ZENCODER, Subtype.RULE)),
            (".kiro/agents/reviewer.json", DialectMatch(PackageFormat.KIRO_AGENT, Subtype.AGENT)),
        ],
    )
    def test_known_paths(self, path: str, expected: DialectMatch) -> None:
        """Test conventional paths map to their dialect."""
        assert detect_dialect(path) == expected

    def test_unknown_path(self) -> None:
        """Test unconventional paths are not guessed."""
        assert detect_dialect("notes/README.md") is None


class TestValidateManifest:
    """Tests for multi-package manifest validation."""

    @pytest.fixture
    def valid_package(self) -> dict[str, Any]:
        return {
            "name": "react-rules",
            "version": "1.0.0",
            "description": "React conventions",
            "format": "cursor",
            "files": ["react.mdc"],
        }

    def test_valid_manifest(self, valid_package: dict[str, Any]) -> None:
        """Test a complete manifest passes."""
        result = validate_manifest({"packages": [valid_package]})

        assert result.valid
        assert result.errors == []

    def test_packages_must_be_array(self) -> None:
        """Test a non-array packages field is rejected."""
        result = validate_manifest({"packages": {"name": "x"}})

        assert not result.valid
        assert result.errors == ["packages field must be an array"]

    def test_packages_must_not_be_empty(self) -> None:
        """Test an empty packages array is rejected."""
        result = validate_manifest({"packages": []})

        assert result.errors == ["packages array must contain at least one package"]

    def test_missing_fields_name_the_package(self, valid_package: dict[str, Any]) -> None:
        """Test errors identify the offending package."""
        del valid_package["description"]

        result = validate_manifest({"packages": [valid_package]})

        assert result.errors == ["Package 'react-rules' (index 0): missing required field 'description'"]

    def test_empty_files(self, valid_package: dict[str, Any]) -> None:
        """Test packages need at least one file."""
        valid_package["files"] = []

        result = validate_manifest({"packages": [valid_package]})

        assert "must contain at least one file" in result.errors[0]

    def test_duplicate_names(self, valid_package: dict[str, Any]) -> None:
        """Test package names must be unique."""
        result = validate_manifest({"packages": [valid_package, dict(valid_package)]})

        assert result.errors == ["Duplicate package name: react-rules"]

    def test_unknown_format(self, valid_package: dict[str, Any]) -> None:
        """Test formats must be known dialects."""
        valid_package["format"] = "notepad"

        result = validate_manifest({"packages": [valid_package]})

        assert result.errors == ["Package 'react-rules' (index 0): unknown format 'notepad'"]

    @pytest.mark.parametrize("key", ["format", "subtype"])
    def test_list_valued_field_reported(self, key: str, valid_package: dict[str, Any]) -> None:
        """Test a list where a string belongs is an error, not a crash."""
        valid_package[key] = ["cursor", "claude"]

        result = validate_manifest({"packages": [valid_package]})

        assert result.errors == [f"Package 'react-rules' (index 0): {key} must be a string"]

    def test_list_valued_name_reported(self, valid_package: dict[str, Any]) -> None:
        """Test non-string names are reported and skipped for duplicates."""
        valid_package["name"] = ["react", "rules"]

        result = validate_manifest({"packages": [valid_package, dict(valid_package)]})

        assert result.errors == [
            "Package at index 0: name must be a string",
            "Package at index 1: name must be a string",
        ]


class TestManifestInheritance:
    """Tests for root field inheritance and package filtering."""

    def test_merge_fills_gaps_only(self) -> None:
        """Test root values never override package values."""
        root = {"author": "Team", "license": "MIT", "tags": ["shared"]}
        package = {"name": "a", "author": "Ada"}

        merged = merge_package_fields(root, package)

        assert merged["author"] == "Ada"
        assert merged["license"] == "MIT"
        assert merged["tags"] == ["shared"]

    def test_packages_with_inheritance(self) -> None:
        """Test every package receives inherited fields."""
        manifest = {"homepage": "https://example.com", "packages": [{"name": "a"}, {"name": "b"}]}

        packages = packages_with_inheritance(manifest)

        assert [p["homepage"] for p in packages] == ["https://example.com"] * 2

    def test_filter_by_index_name_and_glob(self) -> None:
        """Test selectors by index, exact name and glob."""
        packages = [{"name": "react-rules"}, {"name": "react-hooks"}, {"name": "python"}]

        assert filter_packages(packages, 2) == [{"name": "python"}]
        assert filter_packages(packages, "python") == [{"name": "python"}]
        assert len(filter_packages(packages, "react-*")) == 2

    def test_filter_errors(self) -> None:
        """Test out-of-range indexes and unmatched names raise."""
        packages = [{"name": "a"}]
        with pytest.raises(IndexError, match=r"out of range \(0-0\)"):
            filter_packages(packages, 3)
        with pytest.raises(ValueError, match="No packages match filter: z"):
            filter_packages(packages, "z")
