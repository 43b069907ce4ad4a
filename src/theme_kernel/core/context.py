"""ThemeContext: the validated config as seen by theme services."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from theme_kernel.config.schema import (
    FeatureFlagValue,
    ValidatedConfig,
    freeze_sections,
    thaw_value,
)


class ThemeContext(BaseModel):
    """Read-only view of a booted theme: validated config plus environment.

    ``feature_flags``, ``paths`` and ``options`` are exposed as read-only
    mappings; nested lists in ``options`` become tuples.
    """

    model_config = {"frozen": True}

    theme: str
    text_domain: str
    config_version: str
    environment: str
    feature_flags: dict[str, FeatureFlagValue] = Field(default_factory=dict)
    paths: dict[str, str] = Field(default_factory=dict)
    options: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def sections_are_read_only(self) -> ThemeContext:
        freeze_sections(self)
        return self

    @classmethod
    def from_validated(cls, config: ValidatedConfig, environment: str) -> ThemeContext:
        return cls(
            theme=config.theme,
            text_domain=config.text_domain,
            config_version=config.config_version,
            environment=environment,
            feature_flags=thaw_value(config.feature_flags),
            paths=thaw_value(config.paths),
            options=thaw_value(config.options),
        )
