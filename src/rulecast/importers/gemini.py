"""Gemini CLI custom command importer (``.gemini/commands/*.toml``).

A command is a TOML table with a required ``prompt`` string and an
optional ``description``. The prompt is markdown and is segmented like
any other body; ``{{args}}`` placeholders are kept as text.
"""

from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from rulecast.importers.base import MalformedDocumentError, MissingFieldError
from rulecast.importers.claude import parse_persona
from rulecast.importers.frontmatter import ParsedDocument
from rulecast.importers.markdown import PreambleParser
from rulecast.importers.structured import StructuredImporter
from rulecast.models.canonical import PackageFormat, Subtype


class GeminiImporter(StructuredImporter):
    """Import Gemini TOML commands."""

    format = PackageFormat.GEMINI
    consumes_description = False

    def split_document(self, text: str) -> ParsedDocument:
        try:
            data = tomlkit.parse(text).unwrap()
        except TOMLKitError as e:
            raise MalformedDocumentError(self.dialect, f"invalid TOML: {e}") from e

        prompt = data.pop("prompt", None)
        if not isinstance(prompt, str) or not prompt.strip():
            raise MissingFieldError(self.dialect, "prompt", "Gemini commands require a non-empty 'prompt' string")
        return ParsedDocument(frontmatter=data, body=prompt, has_frontmatter=True)

    def preamble_parser(self) -> PreambleParser | None:
        return parse_persona

    def detect_subtype(self, frontmatter: dict[str, Any]) -> Subtype:
        return Subtype.SLASH_COMMAND
