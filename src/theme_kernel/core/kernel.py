"""Kernel: explicit boot object for a theme host.

The host constructs one ``Kernel`` per process and passes it (or its
dispatcher and context) to whatever needs them. Boot runs once:

  resolve environment -> validate config -> build ThemeContext -> dispatch ``kernel.booted``

Booting an already booted kernel returns the existing context unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from theme_kernel.config.schema import ConfigSchema, ValidatedConfig
from theme_kernel.events.dispatcher import EventDispatcher
from theme_kernel.observability.logger import new_boot_id

from .context import ThemeContext
from .errors import KernelStateError
from .settings import KernelSettings, load_settings

logger = logging.getLogger(__name__)

BOOTED_EVENT = "kernel.booted"


class Kernel:
    """Owns the dispatcher and, once booted, the theme context."""

    def __init__(
        self,
        settings: KernelSettings | None = None,
        schema: ConfigSchema | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self._settings = settings or load_settings()
        self._schema = schema or ConfigSchema()
        self._dispatcher = dispatcher or EventDispatcher()
        self._context: ThemeContext | None = None
        self._config: ValidatedConfig | None = None

    @property
    def settings(self) -> KernelSettings:
        return self._settings

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    @property
    def booted(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> ThemeContext:
        if self._context is None:
            raise KernelStateError("Kernel has not been booted yet.")
        return self._context

    @property
    def config(self) -> ValidatedConfig:
        if self._config is None:
            raise KernelStateError("Kernel has not been booted yet.")
        return self._config

    def boot(self, raw_config: Mapping[str, Any]) -> ThemeContext:
        """Validate *raw_config* and bring the kernel up.

        Raises:
            KernelStateError: No environment configured.
            ConfigStructureError, ConfigVersionError: Config rejected.
        """
        if self._context is not None:
            logger.debug("Kernel already booted, ignoring boot call")
            return self._context

        environment = self._settings.environment
        if not environment:
            raise KernelStateError(
                "THEME_KERNEL_ENVIRONMENT must be set and non-empty to boot the kernel."
            )

        kernel_version = self._settings.kernel_version
        config = self._schema.validate(raw_config, kernel_version, environment)

        boot_id = new_boot_id()
        self._config = config
        self._context = ThemeContext.from_validated(config, environment)

        logger.info(
            "Kernel booted theme=%s config_version=%s mode=%s environment=%s boot_id=%s",
            config.theme,
            config.config_version,
            config.validation_mode.value,
            environment,
            boot_id,
        )

        self._dispatcher.dispatch(
            BOOTED_EVENT,
            {
                "context": self._context,
                "environment": environment,
                "kernel_version": kernel_version,
            },
        )
        return self._context
