"""Rulecast - AI coding-assistant rule format converter.

Rulecast converts rule, agent and instruction files between the dialects
used by AI coding assistants (Cursor, Claude, Copilot, Kiro, Windsurf,
AGENTS.md, Trae, Factory Droid, Aider) through a single canonical package.

Core principles:
- One canonical model: every dialect is imported into and exported from it
- Loss is measured: exports report warnings and a 0-100 quality score
- Pure conversions: the engine never reads or writes files itself
"""

__version__ = "0.1.0"
__author__ = "Rulecast Contributors"
