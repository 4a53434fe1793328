"""Read-only heuristic tables for section inference, tagging and scoring.

These tables are defined once and passed into importers and exporters
rather than looked up globally, so tests and configuration can substitute
their own values. All of them are immutable.
"""

from dataclasses import dataclass

from rulecast.models.canonical import SectionKind

# =============================================================================
# Section Inference and Tagging
# =============================================================================

# Technology vocabulary for best-effort tag inference (word, tag)
TECH_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("typescript", "typescript"),
    ("javascript", "javascript"),
    ("python", "python"),
    ("react", "react"),
    ("vue", "vue"),
    ("angular", "angular"),
    ("next.js", "nextjs"),
    ("node.js", "nodejs"),
    ("django", "django"),
    ("flask", "flask"),
    ("fastapi", "fastapi"),
    ("rust", "rust"),
    ("golang", "go"),
    ("java", "java"),
    ("testing", "testing"),
    ("test", "testing"),
    ("api", "api"),
    ("backend", "backend"),
    ("frontend", "frontend"),
    ("database", "database"),
    ("sql", "database"),
    ("security", "security"),
    ("docker", "docker"),
    ("kubernetes", "kubernetes"),
)

MAX_INFERRED_TAGS = 5


@dataclass(frozen=True)
class SectionHeuristics:
    """Keyword tables used to infer a section kind from its heading.

    Attributes:
        keyword_rules: (kind, keywords) pairs checked in order; the first
            kind with a keyword contained in the lower-cased heading wins
        lookahead: Number of lines after a heading inspected for structure
        tag_vocabulary: (word, tag) pairs used to infer package tags
        max_tags: Upper bound on inferred tags
    """

    keyword_rules: tuple[tuple[SectionKind, tuple[str, ...]], ...] = (
        (SectionKind.EXAMPLES, ("example", "sample", "usage")),
        (SectionKind.RULES, ("rule", "guideline", "standard", "convention", "policy", "principle")),
        (SectionKind.CONTEXT, ("context", "background", "overview")),
    )
    lookahead: int = 4
    tag_vocabulary: tuple[tuple[str, str], ...] = TECH_KEYWORDS
    max_tags: int = MAX_INFERRED_TAGS

    def match_keyword(self, heading: str) -> SectionKind | None:
        """Return the first kind whose keywords appear in the heading."""
        lowered = heading.lower()
        for kind, keywords in self.keyword_rules:
            if any(keyword in lowered for keyword in keywords):
                return kind
        return None


# =============================================================================
# Quality Scoring
# =============================================================================


@dataclass(frozen=True)
class ScoringPolicy:
    """Penalties applied to an export's quality score.

    Attributes:
        skipped_section_penalty: Cost of each section the dialect cannot express
        lossy_penalty: One-off cost when any warning reports lost content
        lossy_markers: Substrings that mark a warning as reporting loss
        validation_error_penalty: Cost of each output schema violation
    """

    skipped_section_penalty: int = 10
    lossy_penalty: int = 10
    validation_error_penalty: int = 5
    lossy_markers: tuple[str, ...] = ("not supported", "skipped")

    def __post_init__(self) -> None:
        if min(self.skipped_section_penalty, self.lossy_penalty, self.validation_error_penalty) < 0:
            raise ValueError("Scoring penalties must not be negative")

    def is_lossy(self, warnings: list[str]) -> bool:
        """Return True if any warning reports lost content."""
        return any(marker in warning for warning in warnings for marker in self.lossy_markers)

    def score(
        self,
        skipped_sections: int,
        lossy: bool,
        validation_errors: int = 0,
        extra_penalty: int = 0,
    ) -> int:
        """Compute a quality score clamped to 0..100.

        ``extra_penalty`` carries dialect-specific deductions, such as a
        subtype the target can only approximate.
        """
        score = 100 - skipped_sections * self.skipped_section_penalty
        score -= validation_errors * self.validation_error_penalty + extra_penalty
        if lossy:
            score -= self.lossy_penalty
        return max(0, min(100, score))


DEFAULT_HEURISTICS = SectionHeuristics()
DEFAULT_SCORING = ScoringPolicy()
