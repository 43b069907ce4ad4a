"""Kernel runtime settings.

Loaded from environment variables (prefix ``THEME_KERNEL_``) with
pydantic-settings, optionally overridden by the host.
"""

from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings

from theme_kernel import KERNEL_VERSION


class KernelSettings(BaseSettings):
    """Host-level settings the kernel needs to boot.

    ``environment`` plays the role of the host's deployment environment
    token (e.g. ``development``, ``staging``, ``production``). It is
    compared only against ``production`` / ``prod`` when gating tolerant
    config validation.
    """

    environment: str = ""
    kernel_version: str = KERNEL_VERSION

    # Observability
    log_level: str = "INFO"
    log_format: str = "console"  # "json" or "console"

    model_config = {"env_prefix": "THEME_KERNEL_"}


def load_settings(overrides: dict[str, Any] | None = None) -> KernelSettings:
    """Build settings from env vars, with *overrides* applied on top."""
    return KernelSettings(**(overrides or {}))
