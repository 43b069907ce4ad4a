"""Shared fixtures for the theme-kernel test suite."""

from __future__ import annotations

import logging

import pytest

from theme_kernel import KERNEL_VERSION
from theme_kernel.config.policy import ConfigVersionPolicy
from theme_kernel.config.schema import ConfigSchema
from theme_kernel.core.settings import KernelSettings
from theme_kernel.events.dispatcher import EventDispatcher


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@pytest.fixture
def kernel_version() -> str:
    return KERNEL_VERSION


@pytest.fixture
def policy() -> ConfigVersionPolicy:
    return ConfigVersionPolicy()


@pytest.fixture
def schema(policy) -> ConfigSchema:
    return ConfigSchema(policy)


@pytest.fixture
def minimal_config() -> dict:
    """Smallest config accepted in strict mode."""
    return {
        "theme": "corbi",
        "text_domain": "corbi-td",
        "config_version": "1.0",
    }


@pytest.fixture
def full_config() -> dict:
    """Config using every allowed root key."""
    return {
        "theme": "corbi",
        "text_domain": "corbi-td",
        "config_version": "1.0",
        "validation_mode": "strict",
        "feature_flags": {"progressive_loading": True, "max_items": 12, "variant": "b"},
        "paths": {"assets": "assets/dist", "languages": "languages"},
        "options": {"menus": ["primary", "footer"], "colors": {"accent": "#ff6600"}},
    }


@pytest.fixture
def tolerant_config() -> dict:
    """Migratable 0.9 config in tolerant mode carrying a legacy root key."""
    return {
        "theme": "corbi",
        "text_domain": "corbi-td",
        "config_version": "0.9",
        "validation_mode": "tolerant",
        "legacy_loader": "blocking",
    }


@pytest.fixture
def settings() -> KernelSettings:
    return KernelSettings(environment="development")


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo setup_logging() side effects between tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
