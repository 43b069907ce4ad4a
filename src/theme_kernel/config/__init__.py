"""Kernel configuration: schema validation and version compatibility.

- **schema**: ``ConfigSchema`` validator producing ``ValidatedConfig``
- **policy**: ``ConfigVersionPolicy`` compatibility table and gates
- **loader**: TOML / JSON config file reading
- **exporter**: pretty JSON export of a validated config
"""

from theme_kernel.config.exporter import ConfigExporter
from theme_kernel.config.loader import load_raw_config
from theme_kernel.config.policy import (
    DEFAULT_COMPATIBILITY,
    CompatibilityRecord,
    ConfigVersionPolicy,
)
from theme_kernel.config.schema import ROOT_KEYS, ConfigSchema, ValidatedConfig

__all__ = [
    "DEFAULT_COMPATIBILITY",
    "ROOT_KEYS",
    "CompatibilityRecord",
    "ConfigExporter",
    "ConfigSchema",
    "ConfigVersionPolicy",
    "ValidatedConfig",
    "load_raw_config",
]
