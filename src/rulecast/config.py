"""Rulecast configuration system.

Configuration is YAML-based with per-run CLI overrides (--to, --output-dir, --ci).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.rulecast/config.yaml
3. ./rulecast.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from rulecast.heuristics import ScoringPolicy
from rulecast.models.canonical import parse_format
from rulecast.models.conversion import ExportOptions

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        directory: Root directory converted files are written under
        default_format: Target dialect used when --to is omitted
    """

    directory: str = "."
    default_format: str | None = None

    def __post_init__(self) -> None:
        if self.default_format is not None:
            parse_format(self.default_format)


@dataclass
class ScoringConfig:
    """Quality score penalties.

    Attributes:
        skipped_section_penalty: Points lost per skipped section
        lossy_penalty: Points lost once when the conversion is lossy
        validation_error_penalty: Points lost per output schema violation
    """

    skipped_section_penalty: int = 10
    lossy_penalty: int = 10
    validation_error_penalty: int = 5

    def __post_init__(self) -> None:
        penalties = (self.skipped_section_penalty, self.lossy_penalty, self.validation_error_penalty)
        if min(penalties) < 0:
            raise ValueError(f"Scoring penalties must not be negative (got {', '.join(map(str, penalties))})")

    def to_policy(self) -> ScoringPolicy:
        return ScoringPolicy(
            skipped_section_penalty=self.skipped_section_penalty,
            lossy_penalty=self.lossy_penalty,
            validation_error_penalty=self.validation_error_penalty,
        )


@dataclass
class BatchConfig:
    """Batch conversion settings.

    Attributes:
        max_workers: Thread pool size (None lets the executor decide)
        pattern: Glob selecting files under the batch directory
    """

    max_workers: int | None = None
    pattern: str = "**/*.md*"

    def __post_init__(self) -> None:
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"batch.max_workers must be at least 1 (got {self.max_workers})")


@dataclass
class CIConfig:
    """CI/CD-specific configuration.

    Attributes:
        fail_on_warning: Exit with error if warnings occur
        json_output: Use JSON output format
    """

    fail_on_warning: bool = False
    json_output: bool = False


@dataclass
class RulecastConfig:
    """Top-level Rulecast configuration.

    Attributes:
        output: Output directory and default target
        scoring: Quality score penalties
        dialects: Per-dialect export settings
        batch: Batch conversion settings
        ci: CI/CD settings
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    dialects: ExportOptions = field(default_factory=ExportOptions)
    batch: BatchConfig = field(default_factory=BatchConfig)
    ci: CIConfig = field(default_factory=CIConfig)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    def scoring_policy(self) -> ScoringPolicy:
        return self.scoring.to_policy()

    def export_options(self) -> ExportOptions:
        return self.dialects


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${KIRO_DOMAIN} -> value of KIRO_DOMAIN

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.rulecast/config.yaml
    2. ./rulecast.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".rulecast" / "config.yaml",
        start_path / "rulecast.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> RulecastConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        RulecastConfig instance

    Raises:
        ValueError: If a value is invalid or an environment variable is unset
    """
    data = substitute_env_vars(data)

    config = RulecastConfig()

    if "output" in data:
        output_data = data["output"] or {}
        config.output = OutputConfig(
            directory=output_data.get("directory", config.output.directory),
            default_format=output_data.get("default_format"),
        )

    if "scoring" in data:
        scoring_data = data["scoring"] or {}
        config.scoring = ScoringConfig(
            skipped_section_penalty=int(scoring_data.get("skipped_section_penalty", 10)),
            lossy_penalty=int(scoring_data.get("lossy_penalty", 10)),
            validation_error_penalty=int(scoring_data.get("validation_error_penalty", 5)),
        )

    if "dialects" in data:
        config.dialects = ExportOptions.from_mapping(data["dialects"])

    if "batch" in data:
        batch_data = data["batch"] or {}
        config.batch = BatchConfig(
            max_workers=batch_data.get("max_workers"),
            pattern=batch_data.get("pattern", config.batch.pattern),
        )

    if "ci" in data:
        ci_data = data["ci"] or {}
        config.ci = CIConfig(
            fail_on_warning=ci_data.get("fail_on_warning", False),
            json_output=ci_data.get("json_output", False),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> RulecastConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        RulecastConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = RulecastConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# Rulecast Configuration

# Output settings
output:
  directory: "."
  # default_format: "cursor"  # Target dialect when --to is omitted

# Quality score penalties (0-100 score)
scoring:
  skipped_section_penalty: 10  # Per section the target cannot express
  lossy_penalty: 10            # Once, when any content is lost
  validation_error_penalty: 5  # Per output schema violation

# Per-dialect export settings
# Explicit settings override metadata carried over from an import
dialects:
  kiro:
    inclusion: "always"        # always, manual, fileMatch
    # file_match_pattern: "src/**/*.ts"  # Required for fileMatch
    # domain: "${KIRO_DOMAIN}"
  # copilot:
  #   apply_to: ["**/*.py"]
  #   instruction_name: "python"
  # cursor:
  #   globs: ["**/*.ts"]
  #   always_apply: false
  # droid:
  #   argument_hint: "<file>"
  #   allowed_tools: ["Read", "Edit"]
  # zencoder:
  #   globs: ["src/**/*.py"]
  #   always_apply: false

# Batch conversion
batch:
  # max_workers: 4
  pattern: "**/*.md*"

# CI/CD settings
ci:
  fail_on_warning: false
  json_output: false
'''
