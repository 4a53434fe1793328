"""Taxonomy assignment, dialect detection and manifest validation."""

from rulecast.taxonomy.assign import assign_taxonomy
from rulecast.taxonomy.detect import (
    DialectMatch,
    detect_dialect,
    detect_subtype_from_frontmatter,
)
from rulecast.taxonomy.manifest import (
    ManifestValidationResult,
    filter_packages,
    merge_package_fields,
    packages_with_inheritance,
    validate_manifest,
)

__all__ = [
    "assign_taxonomy",
    "DialectMatch",
    "detect_dialect",
    "detect_subtype_from_frontmatter",
    "ManifestValidationResult",
    "filter_packages",
    "merge_package_fields",
    "packages_with_inheritance",
    "validate_manifest",
]
