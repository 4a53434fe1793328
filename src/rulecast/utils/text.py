"""Small text helpers shared by importers and exporters."""

import re

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "rules") -> str:
    """Convert a display name into a filename-safe slug.

    Lower-cases the value, turns every run of characters outside
    ``[a-z0-9]`` into one hyphen and trims hyphens from both ends.

    >>> slugify("React Testing: Best Practices!")
    'react-testing-best-practices'
    """
    slug = _NON_SLUG.sub("-", value.lower()).strip("-")
    return slug or fallback


def _split_top_level(value: str) -> list[str]:
    """Split on commas outside ``{...}`` and ``[...]`` groups."""
    items: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(value):
        if char in "{[":
            depth += 1
        elif char in "}]" and depth:
            depth -= 1
        elif char == "," and depth == 0:
            items.append(value[start:index])
            start = index + 1
    items.append(value[start:])
    return items


def split_csv(value: object) -> list[str]:
    """Normalize a comma separated string or a YAML list into clean items.

    Commas inside glob brace and bracket groups do not split, so
    ``"**/*.{ts,tsx}, docs/**"`` yields two patterns.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = _split_top_level(value)
    elif isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        items = [str(value)]
    return [item.strip() for item in items if item and item.strip()]


def longest_backtick_run(text: str) -> int:
    """Return the length of the longest run of backticks in text."""
    runs = re.findall(r"`+", text)
    return max((len(run) for run in runs), default=0)
