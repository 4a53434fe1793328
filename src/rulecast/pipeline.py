"""Conversion pipeline orchestrator.

Coordinates importers and exporters through the dialect registry for single
documents and for batches. The engine itself never touches the filesystem;
callers pass text in and receive text plus reports back.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from rulecast.config import RulecastConfig
from rulecast.importers import FormatError
from rulecast.models.canonical import CanonicalPackage, SourceMetadata
from rulecast.models.conversion import ConversionResult, ExportOptions
from rulecast.registry import (
    DialectRegistry,
    UnknownDialectError,
    get_registry,
    setup_default_dialects,
)

logger = logging.getLogger(__name__)


@dataclass
class ConversionOutcome:
    """Result of converting one document to one dialect.

    Attributes:
        package: Canonical package produced by the import
        result: Export result for the target dialect
        filename: Conventional relative path for the output
    """

    package: CanonicalPackage
    result: ConversionResult
    filename: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "package": self.package.id,
            "filename": self.filename,
            **self.result.to_dict(),
        }


@dataclass
class BatchJob:
    """One document queued for batch conversion.

    Attributes:
        text: Document text
        source: Identity of the document
        dialect: Dialect to import from
        label: Human-readable origin (usually the file path)
    """

    text: str
    source: SourceMetadata
    dialect: str
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.source.id


@dataclass
class ConversionFailure:
    """A batch job that could not be converted.

    Attributes:
        job: Label of the failed job
        stage: Pipeline stage that failed ("import")
        message: Error message
    """

    job: str
    stage: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"job": self.job, "stage": self.stage, "message": self.message}


@dataclass
class BatchEntry:
    """Export of one batch job to one target dialect."""

    job: str
    target: str
    outcome: ConversionOutcome

    def to_dict(self) -> dict[str, Any]:
        return {"job": self.job, "target": self.target, **self.outcome.to_dict()}


@dataclass
class BatchReport:
    """Aggregated results of a batch conversion.

    Attributes:
        targets: Dialects every job was exported to
        entries: Successful imports' exports, in job order
        failures: Jobs that failed before export, in job order
        timestamp: When the batch ran
    """

    targets: list[str]
    entries: list[BatchEntry] = field(default_factory=list)
    failures: list[ConversionFailure] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def total_exports(self) -> int:
        return len(self.entries)

    @property
    def failed_exports(self) -> list[BatchEntry]:
        return [entry for entry in self.entries if not entry.outcome.result.succeeded]

    @property
    def lossy_exports(self) -> list[BatchEntry]:
        return [entry for entry in self.entries if entry.outcome.result.lossy_conversion]

    @property
    def average_quality(self) -> float:
        """Mean quality score across all exports (0 when there are none)."""
        if not self.entries:
            return 0.0
        return sum(entry.outcome.result.quality_score for entry in self.entries) / len(self.entries)

    @property
    def has_warnings(self) -> bool:
        return bool(self.failures) or any(entry.outcome.result.warnings for entry in self.entries)

    def summary(self) -> dict[str, Any]:
        """Get counts for logging and report headers."""
        return {
            "jobs": len({entry.job for entry in self.entries}) + len(self.failures),
            "exports": self.total_exports,
            "failed_imports": len(self.failures),
            "failed_exports": len(self.failed_exports),
            "lossy_exports": len(self.lossy_exports),
            "average_quality": round(self.average_quality, 1),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "targets": list(self.targets),
            "summary": self.summary(),
            "entries": [entry.to_dict() for entry in self.entries],
            "failures": [failure.to_dict() for failure in self.failures],
        }


class ConversionPipeline:
    """Imports documents into canonical packages and exports them to dialects.

    All conversions are pure functions of their inputs, so batch jobs run
    concurrently on a thread pool without coordination.
    """

    def __init__(
        self,
        config: RulecastConfig | None = None,
        registry: DialectRegistry | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Rulecast configuration (uses defaults if None)
            registry: Dialect registry; built from the config's scoring
                policy, or the global registry when no config is given
        """
        self.config = config or RulecastConfig()
        if registry is not None:
            self._registry = registry
        elif config is not None:
            self._registry = setup_default_dialects(
                DialectRegistry(scoring=config.scoring_policy())
            )
        else:
            self._registry = get_registry()

    @property
    def registry(self) -> DialectRegistry:
        return self._registry

    # =========================================================================
    # Single document
    # =========================================================================

    def import_document(self, text: str, source: SourceMetadata, dialect: str) -> CanonicalPackage:
        """Import a document.

        Raises:
            UnknownDialectError: If the dialect has no importer
            StructuralRequirementError: If the document lacks required structure
        """
        return self._registry.get_importer(dialect).import_document(text, source)

    def export_package(
        self,
        package: CanonicalPackage,
        dialect: str,
        options: ExportOptions | None = None,
    ) -> ConversionOutcome:
        """Export a package, using the configured dialect options by default.

        Raises:
            UnknownDialectError: If the dialect has no exporter
        """
        exporter = self._registry.get_exporter(dialect)
        options = options or self.config.export_options()
        result = exporter.export(package, options)
        filename = exporter.suggest_filename(package, options)

        logger.info(
            "Exported %s to %s (quality %d%s)",
            package.id,
            dialect,
            result.quality_score,
            ", lossy" if result.lossy_conversion else "",
        )
        return ConversionOutcome(package=package, result=result, filename=filename)

    def convert(
        self,
        text: str,
        source: SourceMetadata,
        source_format: str,
        target_format: str,
        options: ExportOptions | None = None,
    ) -> ConversionOutcome:
        """Import a document and export it to another dialect."""
        package = self.import_document(text, source, source_format)
        return self.export_package(package, target_format, options)

    # =========================================================================
    # Batch
    # =========================================================================

    def run_batch(
        self,
        jobs: list[BatchJob],
        target_formats: list[str],
        max_workers: int | None = None,
    ) -> BatchReport:
        """Convert many documents to one or more dialects.

        Import failures are recorded and the batch continues. Results keep
        job order regardless of completion order.

        Args:
            jobs: Documents to convert
            target_formats: Dialects to export every document to
            max_workers: Thread pool size (config value when None)

        Returns:
            BatchReport

        Raises:
            UnknownDialectError: If a target dialect has no exporter
        """
        for target in target_formats:
            self._registry.get_exporter(target)

        workers = max_workers or self.config.batch.max_workers
        logger.info("Starting batch of %d documents to %s", len(jobs), ", ".join(target_formats))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda job: self._run_job(job, target_formats), jobs))

        report = BatchReport(targets=list(target_formats))
        for entries, failure in results:
            report.entries.extend(entries)
            if failure is not None:
                report.failures.append(failure)

        logger.info("Batch complete: %s", report.summary())
        return report

    def _run_job(
        self,
        job: BatchJob,
        target_formats: list[str],
    ) -> tuple[list[BatchEntry], ConversionFailure | None]:
        try:
            package = self.import_document(job.text, job.source, job.dialect)
        except (FormatError, UnknownDialectError, ValueError) as e:
            logger.warning("Import of %s failed: %s", job.display_name, e)
            return [], ConversionFailure(job=job.display_name, stage="import", message=str(e))

        entries = [
            BatchEntry(job=job.display_name, target=target, outcome=self.export_package(package, target))
            for target in target_formats
        ]
        return entries, None
