"""YAML frontmatter splitting and parsing."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from rulecast.importers.base import MalformedFrontmatterError, MissingFrontmatterError

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)(.*)\Z", re.DOTALL)
EMPTY_FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n---[ \t]*(?:\r?\n|\Z)(.*)\Z", re.DOTALL)
FLAT_LINE_PATTERN = re.compile(r"^([A-Za-z_][\w-]*)\s*:\s*(.*)$")


@dataclass
class ParsedDocument:
    """A document split into frontmatter and body.

    Attributes:
        frontmatter: Parsed key/value pairs (empty if the block is absent)
        body: Text after the closing delimiter
        has_frontmatter: True if a delimited block was present
    """

    frontmatter: dict[str, Any] = field(default_factory=dict)
    body: str = ""
    has_frontmatter: bool = False


def _parse_flat(block: str) -> dict[str, Any]:
    """Read ``key: value`` lines when the block is not valid YAML."""
    result: dict[str, Any] = {}
    for line in block.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        match = FLAT_LINE_PATTERN.match(line)
        if match is None:
            return {}
        value = match.group(2).strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        result[match.group(1)] = value
    return result


def parse_frontmatter(
    text: str,
    *,
    dialect: str = "generic",
    require: bool = False,
) -> ParsedDocument:
    """Split a document into its frontmatter mapping and body.

    A leading ``---`` line without a closing delimiter is treated as a
    markdown horizontal rule, not as frontmatter.

    Args:
        text: Full document text
        dialect: Dialect name used in error messages
        require: Raise if no frontmatter block is present

    Returns:
        ParsedDocument

    Raises:
        MissingFrontmatterError: If require is set and no block exists
        MalformedFrontmatterError: If the block is not a key/value mapping
    """
    text = text.lstrip("\ufeff")

    empty = EMPTY_FRONTMATTER_PATTERN.match(text)
    if empty is not None:
        return ParsedDocument(frontmatter={}, body=empty.group(1), has_frontmatter=True)

    match = FRONTMATTER_PATTERN.match(text)
    if match is None:
        if require:
            raise MissingFrontmatterError(dialect)
        return ParsedDocument(body=text)

    block, body = match.group(1), match.group(2)

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.debug("Frontmatter is not valid YAML (%s), reading key/value lines", e)
        data = _parse_flat(block)
        if not data:
            raise MalformedFrontmatterError(dialect, str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontmatterError(
            dialect, f"expected a mapping, got {type(data).__name__}"
        )

    return ParsedDocument(
        frontmatter={str(key): value for key, value in data.items()},
        body=body,
        has_frontmatter=True,
    )
