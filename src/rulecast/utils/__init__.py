"""Rulecast utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- text: Slug and list normalization helpers
"""

from rulecast.utils.logging import configure_from_cli, get_logger, setup_logging
from rulecast.utils.text import slugify, split_csv

__all__ = [
    "configure_from_cli",
    "get_logger",
    "setup_logging",
    "slugify",
    "split_csv",
]
