"""Enumerations used across the theme kernel."""

from enum import Enum


class ValidationMode(str, Enum):
    STRICT = "strict"
    TOLERANT = "tolerant"


class VersionState(str, Enum):
    """Lifecycle state of a config schema version in the compatibility table."""

    ACTIVE = "active"
    MIGRATABLE = "migratable"  # Tolerant mode possible inside a kernel window
    DEPRECATED = "deprecated"  # Strict only
    REMOVED = "removed"  # Always rejected


# Environment tokens in which tolerant validation is never allowed.
# Compared case-sensitively.
PRODUCTION_ENVIRONMENTS: frozenset[str] = frozenset({"production", "prod"})
