"""Single writer of the (format, subtype) taxonomy pair."""

import logging
from dataclasses import replace

from rulecast.models.canonical import (
    CanonicalContent,
    CanonicalPackage,
    InstructionsSection,
    PackageDraft,
    PackageFormat,
    Subtype,
    Taxonomy,
    parse_format,
    parse_subtype,
)

logger = logging.getLogger(__name__)


def assign_taxonomy(
    package: PackageDraft | CanonicalPackage,
    format: PackageFormat | str,
    subtype: Subtype | str,
) -> CanonicalPackage:
    """Attach the (format, subtype) pair and return an immutable package.

    This is the only place the taxonomy is set. Importers call it as their
    last step with their draft; calling it again on a finished package with
    the same values returns an equal package.

    Drafts with no content section receive an empty instructions section so
    that every imported package has at least one section besides metadata.

    Args:
        package: Importer draft or an existing package to reclassify
        format: Package format (enum or its string value)
        subtype: Package subtype (enum or its string value)

    Returns:
        CanonicalPackage carrying the taxonomy

    Raises:
        ValueError: If format or subtype is not a known value
    """
    taxonomy = Taxonomy(parse_format(format), parse_subtype(subtype))

    if isinstance(package, CanonicalPackage):
        if package.taxonomy == taxonomy:
            return package
        return replace(package, taxonomy=taxonomy)

    sections = list(package.sections)
    if not package.has_content_section():
        logger.debug("No body sections in %s, adding empty instructions", package.id)
        sections.append(InstructionsSection(title="Instructions", content=""))

    return CanonicalPackage(
        id=package.id,
        name=package.name,
        version=package.version,
        author=package.author,
        description=package.description,
        tags=frozenset(package.tags),
        taxonomy=taxonomy,
        content=CanonicalContent(sections=tuple(sections)),
        metadata={key: dict(value) for key, value in package.metadata.items()},
    )
