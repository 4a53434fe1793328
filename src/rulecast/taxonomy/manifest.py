"""Multi-package manifest validation and helpers.

A multi-package manifest declares several packages in one file:

    name: my-rules
    version: 1.0.0
    author: Example Org
    packages:
      - name: react-rules
        version: 1.0.0
        description: React conventions
        format: cursor
        files: [react.mdc]
"""

import fnmatch
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from rulecast.models.canonical import PackageFormat, Subtype

REQUIRED_PACKAGE_FIELDS = ("name", "version", "description", "format", "files")

# Root fields a package inherits when it does not set its own
INHERITED_FIELDS = (
    "author",
    "license",
    "repository",
    "homepage",
    "organization",
    "tags",
    "keywords",
)

KNOWN_FORMATS = frozenset(f.value for f in PackageFormat)
KNOWN_SUBTYPES = frozenset(s.value for s in Subtype)


@dataclass
class ManifestValidationResult:
    """Result of validating a multi-package manifest.

    Attributes:
        valid: True if no errors were found
        errors: One message per problem, naming the offending package
    """

    valid: bool = True
    errors: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Record an error and mark the manifest invalid."""
        self.errors.append(message)
        self.valid = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"valid": self.valid, "errors": list(self.errors)}


def validate_manifest(manifest: Mapping[str, Any]) -> ManifestValidationResult:
    """Validate a multi-package manifest.

    Args:
        manifest: Parsed manifest mapping

    Returns:
        ManifestValidationResult listing every problem found
    """
    result = ManifestValidationResult()
    packages = manifest.get("packages")

    if not isinstance(packages, list):
        result.add_error("packages field must be an array")
        return result

    if not packages:
        result.add_error("packages array must contain at least one package")
        return result

    seen: set[str] = set()
    for index, package in enumerate(packages):
        if not isinstance(package, Mapping):
            result.add_error(f"Package at index {index} must be an object")
            continue

        name = package.get("name")
        if isinstance(name, str) and name:
            label = f"Package '{name}' (index {index})"
        else:
            label = f"Package at index {index}"

        for key in ("name", "format", "subtype"):
            value = package.get(key)
            if value is not None and not isinstance(value, str):
                result.add_error(f"{label}: {key} must be a string")

        for key in REQUIRED_PACKAGE_FIELDS:
            if key not in package or package[key] in (None, ""):
                result.add_error(f"{label}: missing required field '{key}'")

        files = package.get("files")
        if isinstance(files, list) and not files:
            result.add_error(f"{label}: must contain at least one file")
        elif files is not None and not isinstance(files, list):
            result.add_error(f"{label}: files must be an array")

        fmt = package.get("format")
        if isinstance(fmt, str) and fmt and fmt not in KNOWN_FORMATS:
            result.add_error(f"{label}: unknown format '{fmt}'")

        subtype = package.get("subtype")
        if isinstance(subtype, str) and subtype and subtype not in KNOWN_SUBTYPES:
            result.add_error(f"{label}: unknown subtype '{subtype}'")

        if isinstance(name, str) and name:
            if name in seen:
                result.add_error(f"Duplicate package name: {name}")
            seen.add(name)

    return result


def merge_package_fields(root: Mapping[str, Any], package: Mapping[str, Any]) -> dict[str, Any]:
    """Return a package with fields inherited from the manifest root.

    Package values always win; root values only fill gaps.
    """
    merged = dict(package)
    for key in INHERITED_FIELDS:
        if merged.get(key) in (None, "", []) and root.get(key) not in (None, "", []):
            merged[key] = root[key]
    return merged


def packages_with_inheritance(manifest: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Return every package of a manifest merged with its root fields."""
    return [merge_package_fields(manifest, pkg) for pkg in manifest.get("packages", [])]


def filter_packages(
    packages: Sequence[Mapping[str, Any]],
    selector: int | str,
) -> list[Mapping[str, Any]]:
    """Select packages by index, exact name, or glob pattern.

    Raises:
        IndexError: If an index selector is out of range
        ValueError: If no package matches a name or pattern
    """
    if isinstance(selector, int):
        if selector < 0 or selector >= len(packages):
            raise IndexError(
                f"Package index {selector} out of range (0-{len(packages) - 1})"
            )
        return [packages[selector]]

    exact = [pkg for pkg in packages if pkg.get("name") == selector]
    if exact:
        return exact

    matched = [pkg for pkg in packages if fnmatch.fnmatchcase(str(pkg.get("name", "")), selector)]
    if not matched:
        raise ValueError(f"No packages match filter: {selector}")
    return matched
