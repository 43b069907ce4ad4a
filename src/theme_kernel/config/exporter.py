"""Export a validated configuration as pretty JSON."""

from __future__ import annotations

import json

from .schema import ValidatedConfig


class ConfigExporter:
    INDENT = 4

    @staticmethod
    def to_json(config: ValidatedConfig) -> str:
        return json.dumps(
            config.to_dict(),
            indent=ConfigExporter.INDENT,
            ensure_ascii=False,
        )
