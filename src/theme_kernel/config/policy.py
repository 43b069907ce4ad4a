"""Kernel x config_version compatibility policy.

Each supported ``config_version`` has a lifecycle state and, optionally, a
bounded kernel window inside which tolerant validation is allowed:

  active      -> strict only
  migratable  -> strict, or tolerant inside [tolerant_min_kernel, tolerant_max_kernel]
  deprecated  -> strict only
  removed     -> always rejected

Tolerant mode is additionally forbidden in production environments.
Compatibility is a pure decision: ``assert_compatible`` returns None or
raises :class:`ConfigVersionError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, model_validator

from theme_kernel.core.enums import PRODUCTION_ENVIRONMENTS, ValidationMode, VersionState
from theme_kernel.core.errors import ConfigVersionError
from theme_kernel.core.versions import parse_version, version_in_window


class CompatibilityRecord(BaseModel):
    """Compatibility entry for one config_version."""

    model_config = {"frozen": True}

    state: VersionState
    allow_tolerant: bool = False
    tolerant_min_kernel: str | None = None
    tolerant_max_kernel: str | None = None

    @model_validator(mode="after")
    def window_bounds_are_paired(self) -> CompatibilityRecord:
        bounds = (self.tolerant_min_kernel, self.tolerant_max_kernel)
        if (bounds[0] is None) != (bounds[1] is None):
            raise ValueError(
                "tolerant_min_kernel and tolerant_max_kernel must both be set or both be unset"
            )
        for bound in bounds:
            if bound is not None:
                parse_version(bound)
        return self

    @property
    def has_tolerant_window(self) -> bool:
        return self.tolerant_min_kernel is not None and self.tolerant_max_kernel is not None


# Current contract is strict-only; 0.9 may still be read tolerantly by
# kernel 0.1.0 while hosts migrate.
DEFAULT_COMPATIBILITY: dict[str, CompatibilityRecord] = {
    "1.0": CompatibilityRecord(
        state=VersionState.ACTIVE,
        allow_tolerant=False,
    ),
    "0.9": CompatibilityRecord(
        state=VersionState.MIGRATABLE,
        allow_tolerant=True,
        tolerant_min_kernel="0.1.0",
        tolerant_max_kernel="0.1.0",
    ),
}


class ConfigVersionPolicy:
    """Decides whether a (kernel, config_version, mode, environment) tuple is allowed.

    Parameters
    ----------
    table:
        Optional compatibility table mapping config_version to a
        :class:`CompatibilityRecord` (or a plain dict of its fields).
        Defaults to :data:`DEFAULT_COMPATIBILITY`.
    """

    def __init__(
        self,
        table: Mapping[str, CompatibilityRecord | Mapping[str, Any]] | None = None,
    ) -> None:
        source = DEFAULT_COMPATIBILITY if table is None else table
        self._table: dict[str, CompatibilityRecord] = {
            version: (
                record
                if isinstance(record, CompatibilityRecord)
                else CompatibilityRecord.model_validate(dict(record))
            )
            for version, record in source.items()
        }

    @property
    def records(self) -> dict[str, CompatibilityRecord]:
        return dict(self._table)

    def record_for(self, config_version: str) -> CompatibilityRecord | None:
        return self._table.get(config_version)

    def assert_compatible(
        self,
        kernel_version: str,
        config_version: str,
        validation_mode: ValidationMode | str,
        environment: str,
    ) -> None:
        """Raise :class:`ConfigVersionError` unless the combination is permitted.

        Checks run in a fixed order and the first failing gate wins.
        """
        record = self._table.get(config_version)
        if record is None:
            raise ConfigVersionError(
                "Unknown or unsupported config_version for Kernel configuration."
            )

        try:
            mode = ValidationMode(validation_mode)
        except ValueError:
            raise ConfigVersionError(
                f"Invalid validation_mode value: {validation_mode!r}."
            ) from None

        if record.state == VersionState.REMOVED:
            raise ConfigVersionError("config_version is removed and cannot be used.")

        if record.state == VersionState.DEPRECATED and mode == ValidationMode.TOLERANT:
            raise ConfigVersionError(
                "Tolerant mode is not allowed for deprecated config_version."
            )

        if mode != ValidationMode.TOLERANT:
            return

        if environment in PRODUCTION_ENVIRONMENTS:
            raise ConfigVersionError(
                "Tolerant validation_mode is forbidden in production environment."
            )

        if record.state != VersionState.MIGRATABLE:
            raise ConfigVersionError(
                "Tolerant validation_mode is only allowed for migratable config_version."
            )

        if not record.allow_tolerant:
            raise ConfigVersionError(
                "Tolerant validation_mode is not allowed for this config_version."
            )

        if not record.has_tolerant_window:
            raise ConfigVersionError(
                "Tolerant validation_mode requires a bounded Kernel window for this config_version."
            )

        try:
            inside = version_in_window(
                kernel_version,
                record.tolerant_min_kernel,  # type: ignore[arg-type]
                record.tolerant_max_kernel,  # type: ignore[arg-type]
            )
        except ValueError as exc:
            raise ConfigVersionError(f"Invalid Kernel version: {exc}") from exc

        if not inside:
            raise ConfigVersionError(
                "Tolerant validation_mode is not allowed for this Kernel version "
                "with the given config_version."
            )
