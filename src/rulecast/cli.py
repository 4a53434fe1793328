"""Rulecast CLI interface.

Commands:
- formats: List dialects and their import/export capability
- import: Import a dialect file into a canonical package (JSON)
- convert: Convert a dialect file to another dialect
- export: Export a stored canonical package to a dialect
- batch: Convert a directory of files and write a report
- validate: Validate a multi-package manifest
- init: Initialize Rulecast configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from rulecast import __version__
from rulecast.config import RulecastConfig, load_config
from rulecast.models.canonical import SourceMetadata
from rulecast.models.conversion import ExportOptions
from rulecast.pipeline import ConversionOutcome
from rulecast.utils.logging import configure_from_cli, get_logger

# Create Typer app
app = typer.Typer(
    name="rulecast",
    help="Convert AI coding-assistant rules between Cursor, Claude, Copilot, Kiro and more",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: RulecastConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rulecast {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """Rulecast - AI assistant rules converter.

    Import rules, agents, skills and commands from one assistant's format
    into a canonical package and export them to any other.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, OSError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


# =============================================================================
# Helpers
# =============================================================================


def _current_config() -> RulecastConfig:
    return _config or RulecastConfig()


def _source_for(
    path: Path,
    *,
    package_id: str | None = None,
    name: str | None = None,
    version: str = "1.0.0",
    author: str = "",
    tags: list[str] | None = None,
    subtype: str | None = None,
) -> SourceMetadata:
    """Build SourceMetadata for a file, deriving identity from its path.

    ``SKILL.md`` files are named after their directory. A subtype implied by
    the path (e.g. ``.claude/agents/``) is used unless one is given.
    """
    from rulecast.models.canonical import Subtype
    from rulecast.taxonomy import detect_dialect
    from rulecast.utils import slugify

    stem = path.parent.name if path.name.upper() == "SKILL.MD" else path.name.split(".")[0]
    stem = stem or path.name.lstrip(".").split(".")[0]
    resolved_name = name or stem or "rules"

    if subtype is None:
        match = detect_dialect(path)
        if match is not None and match.subtype not in (None, Subtype.RULE):
            subtype = match.subtype.value

    return SourceMetadata(
        id=package_id or slugify(resolved_name),
        name=resolved_name,
        version=version,
        author=author,
        tags=tuple(tags) if tags else None,
        subtype=subtype,
    )


def _resolve_source_format(path: Path, source_format: str | None) -> str:
    """Return --from, or the dialect detected from the path."""
    from rulecast.taxonomy import detect_dialect

    if source_format:
        return source_format
    match = detect_dialect(path)
    if match is None:
        _logger.error(f"Cannot detect dialect of {path}; pass --from")
        raise typer.Exit(1)
    _logger.debug(f"Detected {match.format.value} dialect for {path}")
    return match.format.value


def _resolve_target(target: str | None) -> str:
    target = target or _current_config().output.default_format
    if not target:
        _logger.error("No target dialect: pass --to or set output.default_format")
        raise typer.Exit(1)
    return target


def _export_options(
    kiro_inclusion: str | None,
    kiro_pattern: str | None,
    apply_to: list[str] | None,
) -> ExportOptions:
    """Merge CLI dialect flags over the configured export options."""
    from rulecast.models.conversion import CopilotOptions, KiroOptions

    options = _current_config().export_options()

    if kiro_inclusion or kiro_pattern:
        kiro = options.kiro or KiroOptions()
        try:
            kiro = replace(
                kiro,
                inclusion=kiro_inclusion or kiro.inclusion,
                file_match_pattern=kiro_pattern or kiro.file_match_pattern,
            )
        except ValueError as e:
            _logger.error(str(e))
            raise typer.Exit(1)
        options = replace(options, kiro=kiro)

    if apply_to:
        copilot = options.copilot or CopilotOptions()
        options = replace(options, copilot=replace(copilot, apply_to=tuple(apply_to)))

    return options


def _write_output(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _emit_outcome(
    outcome: ConversionOutcome,
    output_dir: Path | None,
    dry_run: bool,
    json_output: bool,
) -> None:
    """Write or print a conversion outcome and exit with its status code.

    Exit codes:
        0: Lossless conversion
        2: Lossy or failed conversion (or any warning with fail_on_warning)
    """
    import json as json_module

    config = _current_config()
    result = outcome.result

    for warning in result.warnings:
        _logger.warning(warning)

    if json_output or config.ci.json_output:
        typer.echo(json_module.dumps(outcome.to_dict(), indent=2))
    elif dry_run:
        typer.echo(result.content, nl=False)

    if result.succeeded and not dry_run:
        target = (output_dir or Path(config.output.directory)) / outcome.filename
        _write_output(target, result.content)
        _logger.structured(
            logging.INFO,
            f"Wrote {target} (quality {result.quality_score}/100)",
            package=outcome.package.id,
            format=result.format,
            quality=result.quality_score,
            lossy=result.lossy_conversion,
        )

    if not result.succeeded or result.lossy_conversion:
        raise typer.Exit(2)
    if config.ci.fail_on_warning and result.warnings:
        raise typer.Exit(2)
    raise typer.Exit(0)


# =============================================================================
# formats command
# =============================================================================


@app.command()
def formats(
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """List supported dialects and their import/export capability."""
    import json as json_module

    from rulecast.exporters import DISPLAY_NAMES
    from rulecast.registry import get_registry

    capabilities = get_registry().capabilities()

    if json_output:
        typer.echo(json_module.dumps(capabilities, indent=2))
        return

    typer.echo("\nSupported dialects\n")
    for name, caps in capabilities.items():
        directions = [d for d in ("import", "export") if caps[d]]
        typer.echo(f"  {name:<10} {DISPLAY_NAMES.get(name, name):<10} {' + '.join(directions)}")
    typer.echo()


# =============================================================================
# import command
# =============================================================================


@app.command("import")
def import_command(
    file: Annotated[
        Path,
        typer.Argument(
            help="Dialect file to import",
            exists=True,
            dir_okay=False,
        ),
    ],
    source_format: Annotated[
        str | None,
        typer.Option("--from", "-f", help="Source dialect (detected from the path if omitted)"),
    ] = None,
    package_id: Annotated[str | None, typer.Option("--id", help="Package id")] = None,
    name: Annotated[str | None, typer.Option("--name", help="Package name")] = None,
    version: Annotated[str, typer.Option("--version", help="Package version")] = "1.0.0",
    author: Annotated[str, typer.Option("--author", help="Package author")] = "",
    tags: Annotated[
        list[str] | None,
        typer.Option("--tag", "-t", help="Package tag (repeatable; disables tag inference)"),
    ] = None,
    subtype: Annotated[str | None, typer.Option("--subtype", help="Override detected subtype")] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write canonical JSON to this file"),
    ] = None,
) -> None:
    """Import a dialect file and print its canonical package as JSON.

    Exit codes:
        0: Imported
        1: Document is missing structure its dialect requires
    """
    import json as json_module

    from rulecast.importers import FormatError
    from rulecast.pipeline import ConversionPipeline
    from rulecast.registry import UnknownDialectError

    dialect = _resolve_source_format(file, source_format)
    pipeline = ConversionPipeline(config=_current_config())

    try:
        source = _source_for(
            file,
            package_id=package_id,
            name=name,
            version=version,
            author=author,
            tags=tags,
            subtype=subtype,
        )
        package = pipeline.import_document(file.read_text(encoding="utf-8"), source, dialect)
    except (FormatError, UnknownDialectError, ValueError) as e:
        _logger.error(f"Import failed: {e}")
        raise typer.Exit(1)

    rendered = json_module.dumps(package.to_dict(), indent=2, ensure_ascii=False)
    if output:
        _write_output(output, rendered + "\n")
        _logger.info(f"Wrote canonical package to {output}")
    else:
        typer.echo(rendered)


# =============================================================================
# convert command
# =============================================================================


@app.command()
def convert(
    file: Annotated[
        Path,
        typer.Argument(
            help="Dialect file to convert",
            exists=True,
            dir_okay=False,
        ),
    ],
    target: Annotated[
        str | None,
        typer.Option("--to", help="Target dialect (config output.default_format if omitted)"),
    ] = None,
    source_format: Annotated[
        str | None,
        typer.Option("--from", "-f", help="Source dialect (detected from the path if omitted)"),
    ] = None,
    name: Annotated[str | None, typer.Option("--name", help="Package name")] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory to write the converted file under"),
    ] = None,
    kiro_inclusion: Annotated[
        str | None,
        typer.Option("--kiro-inclusion", help="Kiro inclusion mode: always, manual, fileMatch"),
    ] = None,
    kiro_pattern: Annotated[
        str | None,
        typer.Option("--kiro-pattern", help="Kiro fileMatchPattern"),
    ] = None,
    apply_to: Annotated[
        list[str] | None,
        typer.Option("--apply-to", help="Copilot applyTo glob (repeatable)"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the converted content without writing files"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the conversion result as JSON"),
    ] = False,
) -> None:
    """Convert a dialect file to another dialect.

    Exit codes:
        0: Lossless conversion written
        1: Import failed (missing required structure, unknown dialect)
        2: Conversion was lossy or failed
    """
    from rulecast.importers import FormatError
    from rulecast.pipeline import ConversionPipeline
    from rulecast.registry import UnknownDialectError

    dialect = _resolve_source_format(file, source_format)
    target_format = _resolve_target(target)
    options = _export_options(kiro_inclusion, kiro_pattern, apply_to)
    pipeline = ConversionPipeline(config=_current_config())

    try:
        source = _source_for(file, name=name)
        outcome = pipeline.convert(
            file.read_text(encoding="utf-8"),
            source,
            dialect,
            target_format,
            options,
        )
    except (FormatError, UnknownDialectError, ValueError) as e:
        _logger.error(f"Conversion failed: {e}")
        raise typer.Exit(1)

    _emit_outcome(outcome, output_dir, dry_run, json_output)


# =============================================================================
# export command
# =============================================================================


@app.command()
def export(
    package_file: Annotated[
        Path,
        typer.Argument(
            help="Canonical package JSON (as written by 'rulecast import')",
            exists=True,
            dir_okay=False,
        ),
    ],
    target: Annotated[
        str | None,
        typer.Option("--to", help="Target dialect (config output.default_format if omitted)"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory to write the exported file under"),
    ] = None,
    kiro_inclusion: Annotated[
        str | None,
        typer.Option("--kiro-inclusion", help="Kiro inclusion mode: always, manual, fileMatch"),
    ] = None,
    kiro_pattern: Annotated[
        str | None,
        typer.Option("--kiro-pattern", help="Kiro fileMatchPattern"),
    ] = None,
    apply_to: Annotated[
        list[str] | None,
        typer.Option("--apply-to", help="Copilot applyTo glob (repeatable)"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print the exported content without writing files"),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the conversion result as JSON"),
    ] = False,
) -> None:
    """Export a stored canonical package to a dialect.

    Exit codes:
        0: Lossless export written
        1: Package file is invalid or the dialect is unknown
        2: Export was lossy or failed
    """
    import json as json_module

    from rulecast.models.canonical import CanonicalPackage
    from rulecast.pipeline import ConversionPipeline
    from rulecast.registry import UnknownDialectError

    target_format = _resolve_target(target)
    options = _export_options(kiro_inclusion, kiro_pattern, apply_to)

    try:
        data = json_module.loads(package_file.read_text(encoding="utf-8"))
        package = CanonicalPackage.from_dict(data)
    except (json_module.JSONDecodeError, ValueError, KeyError, TypeError) as e:
        _logger.error(f"Invalid canonical package {package_file}: {e}")
        raise typer.Exit(1)

    pipeline = ConversionPipeline(config=_current_config())
    try:
        outcome = pipeline.export_package(package, target_format, options)
    except UnknownDialectError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    _emit_outcome(outcome, output_dir, dry_run, json_output)


# =============================================================================
# batch command
# =============================================================================


@app.command()
def batch(
    directory: Annotated[
        Path,
        typer.Argument(
            help="Directory containing dialect files",
            exists=True,
            file_okay=False,
        ),
    ],
    targets: Annotated[
        list[str],
        typer.Option("--to", help="Target dialect (repeatable)"),
    ],
    source_format: Annotated[
        str | None,
        typer.Option("--from", "-f", help="Source dialect for every file (detected per file if omitted)"),
    ] = None,
    pattern: Annotated[
        str | None,
        typer.Option("--pattern", "-p", help="Glob selecting files (config batch.pattern if omitted)"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Write converted files under this directory"),
    ] = None,
    report: Annotated[
        Path | None,
        typer.Option("--report", "-r", help="Write a markdown conversion report"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", min=1, help="Number of worker threads"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the batch report as JSON"),
    ] = False,
) -> None:
    """Convert every matching file in a directory to one or more dialects.

    Files whose dialect cannot be detected are skipped. Import failures are
    recorded in the report and never stop the batch.

    Exit codes:
        0: All conversions lossless
        1: No files to convert, or an unknown target dialect
        2: Some imports failed or some exports were lossy
    """
    import json as json_module

    from rulecast.pipeline import BatchJob, ConversionPipeline
    from rulecast.registry import UnknownDialectError
    from rulecast.taxonomy import detect_dialect
    from rulecast.templates import ReportRenderer

    config = _current_config()
    glob = pattern or config.batch.pattern

    jobs: list[BatchJob] = []
    for path in sorted(p for p in directory.glob(glob) if p.is_file()):
        relative = path.relative_to(directory)
        dialect = source_format
        if dialect is None:
            match = detect_dialect(relative)
            if match is None:
                _logger.debug(f"Skipping {relative}: unknown dialect")
                continue
            dialect = match.format.value
        try:
            source = _source_for(relative)
        except ValueError as e:
            _logger.warning(f"Skipping {relative}: {e}")
            continue
        jobs.append(
            BatchJob(
                text=path.read_text(encoding="utf-8"),
                source=source,
                dialect=dialect,
                label=str(relative),
            )
        )

    if not jobs:
        _logger.error(f"No convertible files in {directory} matching {glob}")
        raise typer.Exit(1)

    pipeline = ConversionPipeline(config=config)
    try:
        batch_report = pipeline.run_batch(jobs, targets, max_workers=workers)
    except UnknownDialectError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    if output_dir is not None:
        written: set[Path] = set()
        for entry in batch_report.entries:
            result = entry.outcome.result
            if not result.succeeded:
                continue
            destination = output_dir / entry.outcome.filename
            if destination in written:
                _logger.warning(f"Skipping {entry.job} -> {destination}: path already written in this batch")
                continue
            _write_output(destination, result.content)
            written.add(destination)
        _logger.info(f"Wrote {len(written)} files under {output_dir}")

    if report is not None:
        _write_output(report, ReportRenderer().render(batch_report))
        _logger.info(f"Wrote report to {report}")

    summary = batch_report.summary()
    if json_output or config.ci.json_output:
        typer.echo(json_module.dumps(batch_report.to_dict(), indent=2))
    else:
        typer.echo(
            f"\nConverted {summary['jobs']} documents into {summary['exports']} exports "
            f"(average quality {summary['average_quality']}/100)"
        )
        if summary["failed_imports"]:
            typer.echo(f"   Failed imports: {summary['failed_imports']}")
        if summary["lossy_exports"]:
            typer.echo(f"   Lossy exports: {summary['lossy_exports']}")

    if batch_report.failures or batch_report.lossy_exports:
        raise typer.Exit(2)
    if config.ci.fail_on_warning and batch_report.has_warnings:
        raise typer.Exit(2)
    raise typer.Exit(0)


# =============================================================================
# validate command
# =============================================================================


@app.command()
def validate(
    manifest: Annotated[
        Path,
        typer.Argument(
            help="Multi-package manifest (JSON or YAML)",
            exists=True,
            dir_okay=False,
        ),
    ],
    package: Annotated[
        str | None,
        typer.Option("--package", "-p", help="Show one package by name, glob or index"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """Validate a multi-package manifest.

    Exit codes:
        0: Manifest is valid
        1: Manifest is unreadable or invalid
    """
    import json as json_module

    import yaml

    from rulecast.taxonomy import filter_packages, packages_with_inheritance, validate_manifest

    _logger.info(f"Validating manifest: {manifest}")

    try:
        text = manifest.read_text(encoding="utf-8")
        if manifest.suffix == ".json":
            data = json_module.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json_module.JSONDecodeError, yaml.YAMLError) as e:
        _logger.error(f"Cannot parse manifest: {e}")
        raise typer.Exit(1)

    if not isinstance(data, dict):
        _logger.error("Manifest must be a mapping with a 'packages' field")
        raise typer.Exit(1)

    result = validate_manifest(data)

    if json_output:
        typer.echo(json_module.dumps(result.to_dict(), indent=2))
    elif result.valid:
        typer.echo(f"✅ Manifest is valid: {manifest} ({len(data['packages'])} packages)")
    else:
        typer.echo(f"❌ Manifest has {len(result.errors)} error(s):")
        for error in result.errors:
            typer.echo(f"   • {error}")

    if not result.valid:
        raise typer.Exit(1)

    if package is not None:
        selector: int | str = int(package) if package.isdigit() else package
        try:
            selected = filter_packages(packages_with_inheritance(data), selector)
        except (IndexError, ValueError) as e:
            _logger.error(str(e))
            raise typer.Exit(1)
        typer.echo(json_module.dumps(selected, indent=2, default=str))

    raise typer.Exit(0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize Rulecast configuration in .rulecast/config.yaml."""
    from rulecast.config import create_default_config

    config_dir = Path(".rulecast")
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_dir.mkdir(exist_ok=True)
    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    typer.echo("\n✅ Rulecast configuration initialized")
    typer.echo(f"   Config: {config_file}")
    raise typer.Exit(0)


if __name__ == "__main__":
    app()
