"""Kernel configuration schema.

``ConfigSchema.validate`` turns a raw config mapping into an immutable
:class:`ValidatedConfig` or raises on the first violated rule:

- :class:`ConfigStructureError` for shape problems (required fields,
  section types, feature flag and path entries, unknown root keys in
  strict mode);
- :class:`ConfigVersionError` when the compatibility policy rejects the
  config_version / validation_mode / kernel / environment combination.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Union

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr, model_validator
from pydantic_core import to_jsonable_python

from theme_kernel.core.enums import ValidationMode
from theme_kernel.core.errors import ConfigStructureError

from .policy import ConfigVersionPolicy

logger = logging.getLogger(__name__)

ROOT_KEYS: tuple[str, ...] = (
    "theme",
    "text_domain",
    "config_version",
    "validation_mode",
    "feature_flags",
    "paths",
    "options",
)

FeatureFlagValue = Union[StrictBool, StrictInt, StrictStr]

SECTION_KEYS: tuple[str, ...] = ("feature_flags", "paths", "options")


def freeze_value(value: Any) -> Any:
    """Read-only deep copy: mappings become ``MappingProxyType``, lists tuples, sets frozensets."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_value(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_value(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(freeze_value(item) for item in value)
    return copy.deepcopy(value)


def thaw_value(value: Any) -> Any:
    """Inverse of :func:`freeze_value`, returning plain mutable containers."""
    if isinstance(value, Mapping):
        return {key: thaw_value(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw_value(item) for item in value]
    if isinstance(value, frozenset):
        return {thaw_value(item) for item in value}
    return copy.deepcopy(value)


def freeze_sections(model: BaseModel) -> None:
    """Replace the section dicts of a frozen model with read-only views."""
    for key in SECTION_KEYS:
        # Field assignment is blocked on frozen models; write the instance dict directly.
        object.__setattr__(model, key, freeze_value(getattr(model, key)))


class ValidatedConfig(BaseModel):
    """Immutable snapshot of a configuration that passed validation."""

    model_config = {"frozen": True}

    theme: StrictStr = Field(min_length=1)
    text_domain: StrictStr = Field(min_length=1)
    config_version: StrictStr = Field(min_length=1)
    validation_mode: ValidationMode = ValidationMode.STRICT
    feature_flags: dict[str, FeatureFlagValue] = Field(default_factory=dict)
    paths: dict[str, StrictStr] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def sections_are_read_only(self) -> ValidatedConfig:
        freeze_sections(self)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible dict, keys in canonical root-key order."""
        return to_jsonable_python(
            {
                "theme": self.theme,
                "text_domain": self.text_domain,
                "config_version": self.config_version,
                "validation_mode": self.validation_mode.value,
                **{key: thaw_value(getattr(self, key)) for key in SECTION_KEYS},
            }
        )


class ConfigSchema:
    """Validates raw kernel configuration mappings.

    Parameters
    ----------
    policy:
        Compatibility policy consulted once the shape is valid. Defaults to
        a :class:`ConfigVersionPolicy` with the built-in table.
    """

    def __init__(self, policy: ConfigVersionPolicy | None = None) -> None:
        self._policy = policy or ConfigVersionPolicy()

    @property
    def policy(self) -> ConfigVersionPolicy:
        return self._policy

    def validate(
        self,
        config: Mapping[str, Any],
        kernel_version: str,
        environment: str,
    ) -> ValidatedConfig:
        if not isinstance(config, Mapping):
            raise ConfigStructureError("Kernel configuration must be a mapping.")

        theme = _extract_string(config, "theme")
        text_domain = _extract_string(config, "text_domain")
        config_version = _extract_string(config, "config_version")

        validation_mode = _resolve_mode(config.get("validation_mode"))

        feature_flags = _extract_section(config, "feature_flags")
        paths = _extract_section(config, "paths")
        options = _extract_section(config, "options")

        _assert_root_keys(config, validation_mode)
        _assert_feature_flags(feature_flags)
        _assert_paths(paths)
        _assert_options(options)

        self._policy.assert_compatible(
            kernel_version,
            config_version,
            validation_mode,
            environment,
        )

        return ValidatedConfig(
            theme=theme,
            text_domain=text_domain,
            config_version=config_version,
            validation_mode=validation_mode,
            feature_flags=dict(feature_flags),
            paths=dict(paths),
            options=dict(options),
        )


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _extract_string(config: Mapping[str, Any], key: str) -> str:
    value = config.get(key)
    if not isinstance(value, str) or value == "":
        raise ConfigStructureError(
            f'Missing or invalid "{key}" in Kernel configuration.'
        )
    return value


def _resolve_mode(value: Any) -> ValidationMode:
    if value is None:
        return ValidationMode.STRICT
    # Exact string match only; enum members are accepted as themselves.
    if isinstance(value, str):
        for mode in ValidationMode:
            if value == mode.value:
                return mode
    raise ConfigStructureError("Invalid validation_mode value.")


def _extract_section(config: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = config.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigStructureError(f"{key} must be a mapping.")
    return value


def _assert_root_keys(config: Mapping[str, Any], mode: ValidationMode) -> None:
    unknown = [key for key in config if key not in ROOT_KEYS]
    if not unknown:
        return

    if mode == ValidationMode.STRICT:
        raise ConfigStructureError(
            "Unknown configuration keys are not allowed in strict mode: "
            + ", ".join(sorted(repr(key) for key in unknown))
        )

    logger.debug("Ignoring unknown configuration keys in tolerant mode: %s", unknown)


def _assert_feature_flags(feature_flags: Mapping[str, Any]) -> None:
    for key, value in feature_flags.items():
        if not isinstance(key, str) or key == "":
            raise ConfigStructureError("feature_flags keys must be non-empty strings.")
        if not isinstance(value, (bool, int, str)):
            raise ConfigStructureError(
                "feature_flags values must be bool, int or string."
            )


def _assert_paths(paths: Mapping[str, Any]) -> None:
    for key, value in paths.items():
        if not isinstance(key, str) or key == "":
            raise ConfigStructureError("paths keys must be non-empty strings.")
        if not isinstance(value, str) or value == "":
            raise ConfigStructureError("paths values must be non-empty strings.")


def _assert_options(options: Mapping[str, Any]) -> None:
    # Values are opaque to the kernel; only the key type is enforced.
    for key in options:
        if not isinstance(key, str):
            raise ConfigStructureError("options keys must be strings.")
