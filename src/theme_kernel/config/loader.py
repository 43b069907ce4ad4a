"""Raw config file loading for the CLI and hosts.

Supports TOML (parsed with ``tomli``) and JSON. Every failure is reported
as :class:`UsageError`; shape validation is left to ``ConfigSchema``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import tomli

from theme_kernel.core.errors import UsageError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".toml", ".json")


def load_raw_config(config_path: str | Path) -> dict[str, Any]:
    """Read *config_path* and return its top-level mapping."""
    path = Path(config_path)
    if not path.is_file():
        raise UsageError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UsageError(
            f"Unsupported config file type {suffix or '(none)'!r}; "
            f"expected one of: {', '.join(SUPPORTED_SUFFIXES)}"
        )

    try:
        with open(path, "rb") as f:
            if suffix == ".toml":
                data = tomli.load(f)
            else:
                data = json.load(f)
    except OSError as exc:
        raise UsageError(f"Cannot read config file {path}: {exc}") from exc
    except (tomli.TOMLDecodeError, ValueError) as exc:
        raise UsageError(f"Cannot parse config file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise UsageError("Config file must contain a mapping.")

    logger.debug("Loaded config file %s (%d root keys)", path, len(data))
    return data
