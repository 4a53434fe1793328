"""Canonical section variants.

A canonical document is an ordered sequence of typed sections. Each variant
is a frozen dataclass carrying a class-level ``kind`` tag; ``Section`` is the
closed union of all variants. Consumers dispatch with ``match`` and close
the match with ``typing.assert_never`` so that adding a variant is caught by
the type checker at every rendering site.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar


class SectionKind(Enum):
    """Discriminator for canonical section variants."""

    METADATA = "metadata"
    INSTRUCTIONS = "instructions"
    RULES = "rules"
    EXAMPLES = "examples"
    CONTEXT = "context"
    PERSONA = "persona"
    TOOLS = "tools"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        """Human label used in warnings ("Persona", "Tools", ...)."""
        return self.value.capitalize()


# Titles used when a section has no heading of its own
DEFAULT_TITLES: dict[SectionKind, str] = {
    SectionKind.INSTRUCTIONS: "Instructions",
    SectionKind.RULES: "Rules",
    SectionKind.EXAMPLES: "Examples",
    SectionKind.CONTEXT: "Context",
    SectionKind.PERSONA: "Persona",
    SectionKind.TOOLS: "Tools",
    SectionKind.CUSTOM: "Custom",
}

PRIORITIES = ("high", "medium", "low")


def _as_tuple(values: Iterable[Any] | None) -> tuple[Any, ...]:
    return tuple(values) if values is not None else ()


@dataclass(frozen=True)
class Rule:
    """A single rule inside a rules section.

    Attributes:
        content: The rule text
        rationale: Optional explanation of why the rule exists
        examples: Inline example tokens (rendered as ``Example: `x```)
    """

    content: str
    rationale: str | None = None
    examples: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "examples", _as_tuple(self.examples))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"content": self.content}
        if self.rationale:
            result["rationale"] = self.rationale
        if self.examples:
            result["examples"] = list(self.examples)
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        """Build a rule from its serialized form."""
        return cls(
            content=data["content"],
            rationale=data.get("rationale"),
            examples=tuple(data.get("examples", ())),
        )


@dataclass(frozen=True)
class Example:
    """A code example.

    Attributes:
        description: What the example shows
        code: Example source code (without fences)
        language: Fence language tag
        good: True for a preferred example, False for one to avoid,
            None when the example is neutral
    """

    description: str
    code: str
    language: str | None = None
    good: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"description": self.description, "code": self.code}
        if self.language:
            result["language"] = self.language
        if self.good is not None:
            result["good"] = self.good
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Example":
        """Build an example from its serialized form."""
        return cls(
            description=data.get("description", ""),
            code=data.get("code", ""),
            language=data.get("language"),
            good=data.get("good"),
        )


@dataclass(frozen=True)
class MetadataSection:
    """Document-level title, description and icon.

    ``dialect_data`` carries dialect-specific fields (e.g. Droid's
    ``argument-hint``) that only the originating dialect re-emits.
    """

    kind: ClassVar[SectionKind] = SectionKind.METADATA

    title: str
    description: str = ""
    icon: str | None = None
    version: str | None = None
    author: str | None = None
    dialect_data: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"title": self.title, "description": self.description}
        for key in ("icon", "version", "author"):
            value = getattr(self, key)
            if value:
                data[key] = value
        if self.dialect_data:
            data["dialect_data"] = dict(self.dialect_data)
        return {"type": self.kind.value, "data": data}


@dataclass(frozen=True)
class InstructionsSection:
    """Free-form prose instructions."""

    kind: ClassVar[SectionKind] = SectionKind.INSTRUCTIONS

    title: str
    content: str
    priority: str | None = None

    def __post_init__(self) -> None:
        if self.priority is not None and self.priority not in PRIORITIES:
            raise ValueError(f"Invalid priority: {self.priority}. Valid: {PRIORITIES}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"title": self.title, "content": self.content}
        if self.priority:
            data["priority"] = self.priority
        return {"type": self.kind.value, "title": self.title, "data": data}


@dataclass(frozen=True)
class RulesSection:
    """A list of rules, optionally ordered."""

    kind: ClassVar[SectionKind] = SectionKind.RULES

    title: str
    items: tuple[Rule, ...] = ()
    ordered: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", _as_tuple(self.items))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.kind.value,
            "title": self.title,
            "data": {
                "items": [item.to_dict() for item in self.items],
                "ordered": self.ordered,
            },
        }


@dataclass(frozen=True)
class ExamplesSection:
    """A list of code examples."""

    kind: ClassVar[SectionKind] = SectionKind.EXAMPLES

    title: str
    examples: tuple[Example, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "examples", _as_tuple(self.examples))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.kind.value,
            "title": self.title,
            "data": {"examples": [example.to_dict() for example in self.examples]},
        }


@dataclass(frozen=True)
class ContextSection:
    """Background information for the assistant."""

    kind: ClassVar[SectionKind] = SectionKind.CONTEXT

    title: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.kind.value,
            "title": self.title,
            "data": {"title": self.title, "content": self.content},
        }


@dataclass(frozen=True)
class PersonaSection:
    """An assistant persona ("You are NAME, ROLE.")."""

    kind: ClassVar[SectionKind] = SectionKind.PERSONA

    role: str
    name: str | None = None
    style: tuple[str, ...] = ()
    expertise: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "style", _as_tuple(self.style))
        object.__setattr__(self, "expertise", _as_tuple(self.expertise))

    @property
    def title(self) -> str:
        return DEFAULT_TITLES[self.kind]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"role": self.role}
        if self.name:
            data["name"] = self.name
        if self.style:
            data["style"] = list(self.style)
        if self.expertise:
            data["expertise"] = list(self.expertise)
        return {"type": self.kind.value, "data": data}


@dataclass(frozen=True)
class ToolsSection:
    """Tools the assistant is allowed to use."""

    kind: ClassVar[SectionKind] = SectionKind.TOOLS

    tools: tuple[str, ...] = ()
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tools", _as_tuple(self.tools))

    @property
    def title(self) -> str:
        return DEFAULT_TITLES[self.kind]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: dict[str, Any] = {"tools": list(self.tools)}
        if self.description:
            data["description"] = self.description
        return {"type": self.kind.value, "data": data}


@dataclass(frozen=True)
class CustomSection:
    """Verbatim content, optionally owned by one editor dialect."""

    kind: ClassVar[SectionKind] = SectionKind.CUSTOM

    content: str
    editor_type: str | None = None
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"type": self.kind.value, "content": self.content}
        if self.editor_type:
            result["editorType"] = self.editor_type
        if self.title:
            result["title"] = self.title
        return result


Section = (
    MetadataSection
    | InstructionsSection
    | RulesSection
    | ExamplesSection
    | ContextSection
    | PersonaSection
    | ToolsSection
    | CustomSection
)


def section_title(section: Section) -> str:
    """Return the heading text for a section, falling back to its kind default."""
    title = getattr(section, "title", None)
    return title or DEFAULT_TITLES.get(section.kind, section.kind.label)


def section_from_dict(data: Mapping[str, Any]) -> Section:
    """Rebuild a section from the dictionary produced by ``to_dict``.

    Raises:
        ValueError: If the section type is unknown
    """
    try:
        kind = SectionKind(data.get("type"))
    except ValueError:
        raise ValueError(f"Unknown section type: {data.get('type')!r}") from None

    body = data.get("data", {})
    title = data.get("title") or body.get("title") or ""

    match kind:
        case SectionKind.METADATA:
            return MetadataSection(
                title=body.get("title", ""),
                description=body.get("description", ""),
                icon=body.get("icon"),
                version=body.get("version"),
                author=body.get("author"),
                dialect_data=dict(body.get("dialect_data", {})),
            )
        case SectionKind.INSTRUCTIONS:
            return InstructionsSection(
                title=title,
                content=body.get("content", ""),
                priority=body.get("priority"),
            )
        case SectionKind.RULES:
            return RulesSection(
                title=title,
                items=tuple(Rule.from_dict(item) for item in body.get("items", ())),
                ordered=bool(body.get("ordered", False)),
            )
        case SectionKind.EXAMPLES:
            return ExamplesSection(
                title=title,
                examples=tuple(Example.from_dict(ex) for ex in body.get("examples", ())),
            )
        case SectionKind.CONTEXT:
            return ContextSection(title=title, content=body.get("content", ""))
        case SectionKind.PERSONA:
            return PersonaSection(
                role=body.get("role", ""),
                name=body.get("name"),
                style=tuple(body.get("style", ())),
                expertise=tuple(body.get("expertise", ())),
            )
        case SectionKind.TOOLS:
            return ToolsSection(
                tools=tuple(body.get("tools", ())),
                description=body.get("description"),
            )
        case SectionKind.CUSTOM:
            return CustomSection(
                content=data.get("content", ""),
                editor_type=data.get("editorType"),
                title=data.get("title"),
            )
