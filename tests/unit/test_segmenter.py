"""Unit tests for the markdown segmenter."""

from rulecast.importers import MarkdownSegmenter, parse_persona
from rulecast.importers.markdown import parse_example_header, split_title_icon
from rulecast.models.canonical import (
    ContextSection,
    Example,
    ExamplesSection,
    InstructionsSection,
    PersonaSection,
    Rule,
    RulesSection,
)


def segment(body: str, **kwargs):
    return MarkdownSegmenter().segment(body, **kwargs)


class TestTitleAndDescription:
    """Tests for the document title, icon and description."""

    def test_title_heading_becomes_rules_section(self) -> None:
        """Test a titled list becomes one rules section named after the title."""
        doc = segment("# Testing Rules\n\n- Always write tests\n- Use strict typing", consume_description=True)

        assert doc.title == "Testing Rules"
        assert doc.description is None
        assert doc.sections == [
            RulesSection(
                title="Testing Rules",
                items=(Rule(content="Always write tests"), Rule(content="Use strict typing")),
            )
        ]

    def test_icon_split_from_title(self) -> None:
        """Test a leading emoji is recorded as the icon."""
        doc = segment("# ⚛️ React Components\n")

        assert doc.title == "React Components"
        assert doc.icon == "⚛️"

    def test_split_title_icon_without_emoji(self) -> None:
        """Test plain titles have no icon."""
        assert split_title_icon("  Plain Title ") == ("Plain Title", None)

    def test_description_consumed(self) -> None:
        """Test the paragraph after the title becomes the description."""
        doc = segment("# Title\n\nFirst line\nsecond line.\n\n## Rules\n\n- a", consume_description=True)

        assert doc.description == "First line second line."
        assert [type(s) for s in doc.sections] == [RulesSection]

    def test_description_kept_as_instructions_when_not_consumed(self) -> None:
        """Test the same paragraph forms the implicit section otherwise."""
        doc = segment("# Title\n\nFirst line\nsecond line.\n\n## Rules\n\n- a")

        assert doc.description is None
        assert doc.sections[0] == InstructionsSection(title="Title", content="First line\nsecond line.")

    def test_empty_explicit_section_kept(self) -> None:
        """Test an explicit heading with no content still yields a section."""
        doc = segment("# T\n\n## Notes\n\n## Rules\n\n- a")

        assert doc.sections[0] == InstructionsSection(title="Notes", content="")


class TestRules:
    """Tests for rules sections."""

    def test_ordered_list(self) -> None:
        """Test numbered lists are recorded as ordered."""
        doc = segment("## Steps\n\n1. First\n2. Second")

        section = doc.sections[0]
        assert isinstance(section, RulesSection)
        assert section.ordered
        assert [rule.content for rule in section.items] == ["First", "Second"]

    def test_rationale_and_inline_examples(self) -> None:
        """Test indented sub-bullets attach rationale and examples to a rule."""
        doc = segment("## Rules\n\n- Use hooks\n  - Rationale: Simpler state\n  - Example: `useState()`")

        assert doc.sections[0].items == (
            Rule(content="Use hooks", rationale="Simpler state", examples=("useState()",)),
        )

    def test_continuation_lines_join_rule(self) -> None:
        """Test indented plain lines continue the previous rule."""
        doc = segment("## Rules\n\n- A long rule\n  that wraps")

        assert doc.sections[0].items[0].content == "A long rule that wraps"

    def test_prose_outside_list_dropped(self) -> None:
        """Test prose in a rules section does not become a rule."""
        doc = segment("## Rules\n\nIntro prose.\n\n- a")

        assert doc.sections[0].items == (Rule(content="a"),)

    def test_bold_name_rules(self) -> None:
        """Test `**Name**: description` lines are rules, keeping the description."""
        doc = segment(
            "## Guidelines\n\n"
            "**Naming**: Use descriptive names\n"
            "  - Rationale: Reads better\n"
            "**Tests**\n"
            "- Keep functions small"
        )

        assert doc.sections[0].items == (
            Rule(content="Use descriptive names", rationale="Reads better"),
            Rule(content="Tests"),
            Rule(content="Keep functions small"),
        )


class TestExamples:
    """Tests for examples sections."""

    def test_good_and_bad_examples(self) -> None:
        """Test marked example headers set the good flag."""
        body = (
            "## Examples\n\n"
            "### ❌ Avoid: Class components\n\n```tsx\nclass A {}\n```\n\n"
            "### ✅ Preferred: Function components\n\n```tsx\nconst A = () => null\n```\n"
        )

        section = segment(body).sections[0]

        assert section == ExamplesSection(
            title="Examples",
            examples=(
                Example(description="Class components", code="class A {}", language="tsx", good=False),
                Example(description="Function components", code="const A = () => null", language="tsx", good=True),
            ),
        )

    def test_neutral_example_takes_preceding_prose(self) -> None:
        """Test an unmarked example is described by the line before it."""
        section = segment("## Usage\n\nCall the client:\n\n```python\nclient.get()\n```").sections[0]

        assert section.examples == (
            Example(description="Call the client", code="client.get()", language="python"),
        )

    def test_unclosed_fence_closed_at_end(self) -> None:
        """Test a fence left open at the end of the document is still an example."""
        section = segment("## Examples\n\n```python\nx = 1").sections[0]

        assert section.examples == (Example(description="Example", code="x = 1", language="python"),)

    def test_parse_example_header(self) -> None:
        """Test header markers and prefixes."""
        assert parse_example_header("✅ Good: fast path") == ("fast path", True)
        assert parse_example_header("Don't: nested loops") == ("nested loops", False)
        assert parse_example_header("Plain") == ("Plain", None)


class TestFences:
    """Tests for code fences outside examples sections."""

    def test_headings_inside_fences_are_not_structure(self) -> None:
        """Test fenced lines never start sections."""
        doc = segment("## Background\n\nRun:\n\n```bash\n## not a heading\n```\n")

        assert doc.sections == [
            ContextSection(title="Background", content="Run:\n\n```bash\n## not a heading\n```"),
        ]

    def test_tilde_fences(self) -> None:
        """Test tilde fences are tracked too."""
        doc = segment("## Background\n\nText\n\n~~~\n- not a rule\n~~~")

        assert "- not a rule" in doc.sections[0].content


class TestPreamble:
    """Tests for the implicit-section hook and persona parsing."""

    def test_preamble_parser_claims_implicit_section(self) -> None:
        """Test a persona preamble replaces the implicit section."""
        doc = segment(
            "# Reviewer\n\nYou are Ada, a meticulous senior code reviewer.\n\n## Rules\n\n- a",
            preamble_parser=parse_persona,
        )

        assert doc.sections[0] == PersonaSection(role="meticulous senior code reviewer", name="Ada")

    def test_preamble_parser_declines(self) -> None:
        """Test non-persona text stays an instructions section."""
        doc = segment("# Reviewer\n\nReads code.\n", preamble_parser=parse_persona)

        assert doc.sections == [InstructionsSection(title="Reviewer", content="Reads code.")]

    def test_persona_style_and_expertise(self) -> None:
        """Test style and expertise lists are read from the preamble."""
        persona = parse_persona(
            "You are Ada, a meticulous reviewer.\n\n"
            "Your communication style is concise and direct.\n\n"
            "Areas of expertise:\n- Python\n- Security"
        )

        assert persona == PersonaSection(
            role="meticulous reviewer",
            name="Ada",
            style=("concise", "direct"),
            expertise=("Python", "Security"),
        )

    def test_role_is_phrase(self) -> None:
        """Test the "Your role is" phrasing."""
        persona = parse_persona("Your role is to be a release manager.")

        assert persona.role == "release manager"
        assert persona.name is None
