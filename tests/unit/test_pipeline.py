"""Unit tests for the conversion pipeline."""

from collections.abc import Callable

import pytest

from rulecast.config import load_config_from_dict
from rulecast.importers import KiroImporter, MissingFieldError
from rulecast.models.canonical import SourceMetadata
from rulecast.models.conversion import ExportOptions, KiroOptions
from rulecast.pipeline import BatchJob, BatchReport, ConversionPipeline
from rulecast.registry import DialectRegistry, UnknownDialectError, get_registry

Reader = Callable[[str], str]


@pytest.fixture
def jobs(read_document: Reader) -> list[BatchJob]:
    """Four documents, one of which cannot be imported."""
    return [
        BatchJob(read_document(".windsurfrules"), SourceMetadata(id="testing", name="testing"), "windsurf", "a"),
        BatchJob(
            read_document(".kiro/steering/missing-inclusion.md"),
            SourceMetadata(id="broken", name="broken"),
            "kiro",
            "b",
        ),
        BatchJob(
            read_document(".claude/agents/code-reviewer.md"),
            SourceMetadata(id="reviewer", name="reviewer", subtype="agent"),
            "claude",
            "c",
        ),
        BatchJob(read_document("AGENTS.md"), SourceMetadata(id="guide", name="guide"), "agents.md"),
    ]


class TestConversionPipeline:
    """Tests for single-document conversion."""

    def test_uses_global_registry_by_default(self) -> None:
        """Test the pipeline shares the process registry without a config."""
        assert ConversionPipeline().registry is get_registry()

    def test_config_scoring_builds_registry(self) -> None:
        """Test a config's scoring penalties reach the exporters."""
        config = load_config_from_dict({"scoring": {"skipped_section_penalty": 20}})

        pipeline = ConversionPipeline(config)

        assert pipeline.registry is not get_registry()
        assert pipeline.registry.get_exporter("windsurf").scoring.skipped_section_penalty == 20

    def test_explicit_registry(self) -> None:
        """Test an injected registry is used as is."""
        registry = DialectRegistry()
        registry.register_importer("kiro", KiroImporter)

        pipeline = ConversionPipeline(registry=registry)

        with pytest.raises(UnknownDialectError):
            pipeline.export_package(None, "kiro")  # type: ignore[arg-type]

    def test_convert(self, read_document: Reader) -> None:
        """Test import followed by export."""
        outcome = ConversionPipeline().convert(
            read_document(".cursor/rules/react.mdc"),
            SourceMetadata(id="react", name="react"),
            "cursor",
            "trae",
        )

        assert outcome.filename == ".trae/rules/react.md"
        assert outcome.result.content.startswith("# React Components\n\nReact component conventions\n")
        assert outcome.to_dict()["package"] == "react"
        assert outcome.to_dict()["qualityScore"] == 100

    def test_import_errors_propagate(self, read_document: Reader) -> None:
        """Test structural errors reach the caller of convert."""
        with pytest.raises(MissingFieldError):
            ConversionPipeline().convert(
                read_document(".kiro/steering/missing-inclusion.md"),
                SourceMetadata(id="x", name="x"),
                "kiro",
                "cursor",
            )

    def test_bad_stored_kiro_inclusion_is_a_failed_export(self, rich_package) -> None:
        """Test invalid stored Kiro data yields a failed result instead of raising."""
        package = rich_package.with_metadata("kiro", {"inclusion": "sometimes"})

        outcome = ConversionPipeline().export_package(package, "kiro")

        assert not outcome.result.succeeded
        assert outcome.filename == ".kiro/steering/python-style.md"
        assert "Invalid Kiro inclusion mode: sometimes" in outcome.result.warnings[0]

    def test_config_options_used_by_default(self, read_document: Reader) -> None:
        """Test configured dialect options apply when none are passed."""
        config = load_config_from_dict({"dialects": {"kiro": {"inclusion": "manual"}}})

        outcome = ConversionPipeline(config).convert(
            read_document("AGENTS.md"), SourceMetadata(id="guide", name="guide"), "agents.md", "kiro"
        )

        assert outcome.result.content.startswith("---\ninclusion: manual\n---")

    def test_explicit_options_win_over_config(self, read_document: Reader) -> None:
        """Test per-call options replace configured ones."""
        config = load_config_from_dict({"dialects": {"kiro": {"inclusion": "manual"}}})
        options = ExportOptions(kiro=KiroOptions(inclusion="always"))

        outcome = ConversionPipeline(config).convert(
            read_document("AGENTS.md"), SourceMetadata(id="guide", name="guide"), "agents.md", "kiro", options
        )

        assert outcome.result.content.startswith("---\ninclusion: always\n---")


class TestRunBatch:
    """Tests for batch conversion."""

    def test_results_keep_job_order(self, jobs: list[BatchJob]) -> None:
        """Test entries follow job order then target order."""
        report = ConversionPipeline().run_batch(jobs, ["cursor", "windsurf"], max_workers=4)

        assert [(e.job, e.target) for e in report.entries] == [
            ("a", "cursor"),
            ("a", "windsurf"),
            ("c", "cursor"),
            ("c", "windsurf"),
            ("guide", "cursor"),
            ("guide", "windsurf"),
        ]

    def test_import_failures_do_not_stop_batch(self, jobs: list[BatchJob]) -> None:
        """Test a broken document is recorded and the rest converted."""
        report = ConversionPipeline().run_batch(jobs, ["cursor"])

        assert len(report.failures) == 1
        failure = report.failures[0]
        assert failure.job == "b"
        assert failure.stage == "import"
        assert "inclusion" in failure.message

    def test_summary(self, jobs: list[BatchJob]) -> None:
        """Test summary counts and average quality."""
        report = ConversionPipeline().run_batch(jobs, ["windsurf"])

        assert report.summary() == {
            "jobs": 4,
            "exports": 3,
            "failed_imports": 1,
            "failed_exports": 0,
            "lossy_exports": 1,
            "average_quality": 90.0,
        }
        assert report.has_warnings

    def test_failed_exports_counted(self, jobs: list[BatchJob]) -> None:
        """Test Kiro exports without an inclusion mode count as failed."""
        report = ConversionPipeline().run_batch(jobs, ["kiro"])

        assert len(report.failed_exports) == 3
        assert report.average_quality == 0.0

    def test_unknown_target_rejected_before_running(self, jobs: list[BatchJob]) -> None:
        """Test invalid targets fail fast."""
        with pytest.raises(UnknownDialectError):
            ConversionPipeline().run_batch(jobs, ["generic"])

    def test_unknown_source_dialect_is_a_failure(self) -> None:
        """Test a job naming an unknown dialect fails alone."""
        job = BatchJob("text", SourceMetadata(id="x", name="x"), "notepad")

        report = ConversionPipeline().run_batch([job], ["windsurf"])

        assert report.failures[0].job == "x"
        assert "notepad" in report.failures[0].message

    def test_empty_report(self) -> None:
        """Test an empty batch has a zero average."""
        report = BatchReport(targets=["cursor"])

        assert report.average_quality == 0.0
        assert not report.has_warnings
        assert report.to_dict()["summary"]["exports"] == 0
