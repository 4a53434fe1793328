"""Entry point for running Rulecast as a module.

Usage:
    python -m rulecast [command] [options]

Example:
    python -m rulecast convert .cursor/rules/testing.mdc --to kiro
    python -m rulecast formats
"""

from rulecast.cli import app

if __name__ == "__main__":
    app()
