"""Dotted-numeric version parsing and comparison.

Versions are compared numerically per segment (``"0.10.0" > "0.9.0"``),
with missing trailing segments treated as zero (``"1.0" == "1.0.0"``).
"""

from __future__ import annotations

from itertools import zip_longest


def parse_version(text: str) -> tuple[int, ...]:
    """Parse ``"major.minor.patch"`` (any number of segments) into ints.

    Raises:
        ValueError: If *text* is empty or any segment is not all digits.
    """
    if not isinstance(text, str) or not text:
        raise ValueError(f"Invalid version string: {text!r}")

    segments = text.split(".")
    if any(not (segment.isascii() and segment.isdigit()) for segment in segments):
        raise ValueError(f"Invalid version string: {text!r}")

    return tuple(int(segment) for segment in segments)


def compare_versions(left: str, right: str) -> int:
    """Return -1, 0 or 1 as *left* is lower than, equal to or higher than *right*."""
    for a, b in zip_longest(parse_version(left), parse_version(right), fillvalue=0):
        if a != b:
            return -1 if a < b else 1
    return 0


def version_in_window(version: str, minimum: str, maximum: str) -> bool:
    """Inclusive range check: ``minimum <= version <= maximum``."""
    return (
        compare_versions(version, minimum) >= 0
        and compare_versions(version, maximum) <= 0
    )
