"""Unit tests for frontmatter splitting."""

import pytest

from rulecast.importers import (
    MalformedFrontmatterError,
    MissingFrontmatterError,
    StructuralRequirementError,
    parse_frontmatter,
)


class TestParseFrontmatter:
    """Tests for parse_frontmatter."""

    def test_yaml_block(self) -> None:
        """Test a YAML mapping is parsed and the body returned."""
        parsed = parse_frontmatter("---\ndescription: Hello\nalwaysApply: true\n---\n# Title\n")

        assert parsed.has_frontmatter
        assert parsed.frontmatter == {"description": "Hello", "alwaysApply": True}
        assert parsed.body == "# Title\n"

    def test_no_block(self) -> None:
        """Test documents without frontmatter keep their full text as body."""
        parsed = parse_frontmatter("# Title\n\nText")

        assert not parsed.has_frontmatter
        assert parsed.frontmatter == {}
        assert parsed.body == "# Title\n\nText"

    def test_byte_order_mark_ignored(self) -> None:
        """Test a leading BOM does not hide the block."""
        parsed = parse_frontmatter("\ufeff---\nname: x\n---\nbody")

        assert parsed.frontmatter == {"name": "x"}
        assert parsed.body == "body"

    def test_empty_block(self) -> None:
        """Test an empty block parses to an empty mapping."""
        parsed = parse_frontmatter("---\n---\nBody")

        assert parsed.has_frontmatter
        assert parsed.frontmatter == {}
        assert parsed.body == "Body"

    def test_comment_only_block(self) -> None:
        """Test a block holding only comments is an empty mapping."""
        parsed = parse_frontmatter("---\n# nothing here\n---\nBody")

        assert parsed.frontmatter == {}

    def test_keys_are_strings(self) -> None:
        """Test non-string YAML keys are converted."""
        parsed = parse_frontmatter("---\n1: one\n---\n")

        assert parsed.frontmatter == {"1": "one"}

    def test_flat_fallback_for_invalid_yaml(self) -> None:
        """Test key/value lines are read when the block is not valid YAML."""
        parsed = parse_frontmatter("---\ndescription: Use: colons\nglobs: *.ts\n---\nBody")

        assert parsed.frontmatter == {"description": "Use: colons", "globs": "*.ts"}
        assert parsed.body == "Body"

    def test_unreadable_block_raises(self) -> None:
        """Test a block that is neither YAML nor key/value lines fails."""
        with pytest.raises(MalformedFrontmatterError, match="Malformed frontmatter in cursor"):
            parse_frontmatter("---\n[unclosed\n---\nBody", dialect="cursor")

    def test_non_mapping_raises(self) -> None:
        """Test a YAML list is rejected."""
        with pytest.raises(MalformedFrontmatterError, match="expected a mapping, got list"):
            parse_frontmatter("---\n- a\n- b\n---\nBody")

    def test_unclosed_block_is_body(self) -> None:
        """Test an opening delimiter without a closing one is a horizontal rule."""
        text = "---\ntitle: x\n\n# Heading"

        parsed = parse_frontmatter(text)

        assert not parsed.has_frontmatter
        assert parsed.body == text

    def test_required_block_missing(self) -> None:
        """Test require raises a structural error naming the dialect."""
        with pytest.raises(MissingFrontmatterError) as exc_info:
            parse_frontmatter("# Title", dialect="kiro", require=True)

        assert isinstance(exc_info.value, StructuralRequirementError)
        assert exc_info.value.dialect == "kiro"
        assert "kiro files require YAML frontmatter" in str(exc_info.value)

    def test_crlf_line_endings(self) -> None:
        """Test Windows line endings are accepted."""
        parsed = parse_frontmatter("---\r\nname: x\r\n---\r\nBody")

        assert parsed.frontmatter == {"name": "x"}
        assert parsed.body == "Body"
