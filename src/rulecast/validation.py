"""JSON Schema validation of rendered dialect output.

Every exported document is checked against the schema of its dialect
(and subtype, where one exists) before it is returned. The rendered text
is first turned into a JSON-like value:

- Markdown dialects with frontmatter validate ``{"frontmatter", "content"}``
- Plain markdown dialects validate ``{"content"}`` (the whole text)
- Gemini validates its parsed TOML command
- Kiro agents validate their parsed JSON configuration

Dialects without a schema are not checked.
"""

import json
import logging
from dataclasses import dataclass, field
from functools import cache
from importlib import resources
from typing import Any

import jsonschema
import tomlkit
import yaml
from jsonschema.protocols import Validator
from tomlkit.exceptions import TOMLKitError

from rulecast.models.canonical import PackageFormat

logger = logging.getLogger(__name__)

# Subtype schemas take precedence over the dialect schema
SUBTYPE_SCHEMAS: dict[tuple[str, str], str] = {
    (PackageFormat.CLAUDE.value, "agent"): "claude-agent",
    (PackageFormat.CLAUDE.value, "skill"): "claude-skill",
    (PackageFormat.CLAUDE.value, "slash-command"): "claude-slash-command",
}

FORMAT_SCHEMAS: dict[str, str] = {
    PackageFormat.CURSOR.value: "cursor",
    PackageFormat.CLAUDE.value: "claude",
    PackageFormat.COPILOT.value: "copilot",
    PackageFormat.KIRO.value: "kiro-steering",
    PackageFormat.WINDSURF.value: "windsurf",
    PackageFormat.AGENTS_MD.value: "agents-md",
    PackageFormat.GEMINI.value: "gemini",
    PackageFormat.CONTINUE.value: "continue",
    PackageFormat.RULER.value: "ruler",
    PackageFormat.ZENCODER.value: "zencoder",
    PackageFormat.KIRO_AGENT.value: "kiro-agent",
}

PLAIN_FORMATS = frozenset(
    {PackageFormat.WINDSURF.value, PackageFormat.AGENTS_MD.value, PackageFormat.RULER.value}
)


@dataclass(frozen=True)
class ValidationIssue:
    """One schema violation.

    Attributes:
        path: JSON pointer to the offending value ("/" for the root)
        message: Human-readable description, prefixed with the path
    """

    path: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating one rendered document."""

    errors: list[ValidationIssue] = field(default_factory=list)
    schema: str | None = None

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]


def schema_name(dialect: str, subtype: str | None = None) -> str | None:
    """Return the schema used for a dialect and optional subtype."""
    if subtype and (dialect, subtype) in SUBTYPE_SCHEMAS:
        return SUBTYPE_SCHEMAS[(dialect, subtype)]
    return FORMAT_SCHEMAS.get(dialect)


@cache
def load_validator(name: str) -> Validator:
    """Load and compile a packaged schema.

    Raises:
        FileNotFoundError: If the schema is not shipped with rulecast
    """
    text = resources.files("rulecast.schemas").joinpath(f"{name}.schema.json").read_text(encoding="utf-8")
    schema = json.loads(text)
    validator_class = jsonschema.validators.validator_for(schema)
    validator_class.check_schema(schema)
    return validator_class(schema)


def split_markdown(text: str) -> tuple[dict[str, Any], str]:
    """Split rendered markdown into its frontmatter mapping and body.

    Raises:
        ValueError: If the frontmatter block is not a YAML mapping
    """
    lines = text.split("\n")
    if not lines or lines[0].strip() != "---":
        return {}, text
    try:
        closing = lines.index("---", 1)
    except ValueError:
        return {}, text

    loaded = yaml.safe_load("\n".join(lines[1:closing]))
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ValueError("frontmatter is not a mapping")
    return loaded, "\n".join(lines[closing + 1 :])


def document_data(dialect: str, content: str) -> Any:
    """Turn rendered text into the value its schema describes.

    Raises:
        ValueError: If the text cannot be parsed in the dialect's syntax
    """
    if dialect == PackageFormat.GEMINI.value:
        try:
            return tomlkit.parse(content).unwrap()
        except TOMLKitError as e:
            raise ValueError(f"invalid TOML: {e}") from e
    if dialect == PackageFormat.KIRO_AGENT.value:
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON: {e}") from e
    if dialect in PLAIN_FORMATS:
        return {"content": content}
    try:
        frontmatter, body = split_markdown(content)
    except yaml.YAMLError as e:
        raise ValueError(f"invalid frontmatter: {e}") from e
    return {"frontmatter": frontmatter, "content": body}


def _pointer(error: jsonschema.ValidationError) -> str:
    parts = [str(part) for part in error.absolute_path]
    return "/" + "/".join(parts) if parts else "/"


def validate_data(name: str, data: Any) -> ValidationResult:
    """Validate an already-parsed value against a named schema."""
    validator = load_validator(name)
    result = ValidationResult(schema=name)
    for error in sorted(validator.iter_errors(data), key=_pointer):
        path = _pointer(error)
        result.errors.append(ValidationIssue(path=path, message=f"{path}: {error.message}"))
    return result


def validate_output(dialect: str, content: str, subtype: str | None = None) -> ValidationResult:
    """Validate rendered dialect text against its schema.

    Args:
        dialect: Target dialect name
        content: Rendered document
        subtype: Package subtype, used to select a more specific schema

    Returns:
        ValidationResult; always valid for dialects without a schema
    """
    name = schema_name(dialect, subtype)
    if name is None:
        return ValidationResult()

    try:
        data = document_data(dialect, content)
    except ValueError as e:
        return ValidationResult(errors=[ValidationIssue(path="/", message=f"/: {e}")], schema=name)

    result = validate_data(name, data)
    if not result.valid:
        logger.debug("%s output failed %s schema: %s", dialect, name, "; ".join(result.messages))
    return result


def format_validation_errors(result: ValidationResult) -> str:
    """Format validation errors for display."""
    if result.valid:
        return ""
    lines = ["Validation Errors:"]
    lines.extend(f"  - {message}" for message in result.messages)
    return "\n".join(lines)
