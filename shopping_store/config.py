from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

ENV_PREFIX = "SHOPPING_STORE_"

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class StoreConfig:
    """Runtime configuration for the shopping store.

    A plain immutable holder. __post_init__ only performs light sanity
    checks; it does no I/O.
    """

    data_dir: str = "data"
    log_dir: str = "logs"
    log_to_file: bool = False
    log_level: str = "INFO"
    default_color_tag: str = "orange"
    json_indent: Optional[int] = 2
    temp_suffix: str = ".tmp"

    def __post_init__(self) -> None:
        if not isinstance(self.data_dir, str) or not self.data_dir:
            raise ValueError("data_dir must be a non-empty string")
        if not isinstance(self.log_dir, str) or not self.log_dir:
            raise ValueError("log_dir must be a non-empty string")
        if not isinstance(self.log_to_file, bool):
            raise ValueError("log_to_file must be a boolean")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in _LEVELS:
            raise ValueError(f"log_level must be one of {list(_LEVELS)}")
        if not isinstance(self.default_color_tag, str) or not self.default_color_tag:
            raise ValueError("default_color_tag must be a non-empty string")
        if self.json_indent is not None and (not isinstance(self.json_indent, int) or self.json_indent < 0):
            raise ValueError("json_indent must be a non-negative integer or None")
        if not isinstance(self.temp_suffix, str) or not self.temp_suffix:
            raise ValueError("temp_suffix must be a non-empty string")

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level.upper())

    @staticmethod
    def from_dict(data: Optional[Dict[str, Any]]) -> "StoreConfig":
        if not data:
            return StoreConfig()
        known = set(StoreConfig.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        return StoreConfig(**data)

    @staticmethod
    def from_file(path: Union[str, Path]) -> "StoreConfig":
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return StoreConfig.from_dict(data)

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "StoreConfig":
        """Build a config from SHOPPING_STORE_* variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        if env.get(ENV_PREFIX + "DATA_DIR"):
            values["data_dir"] = env[ENV_PREFIX + "DATA_DIR"]
        if env.get(ENV_PREFIX + "LOG_DIR"):
            values["log_dir"] = env[ENV_PREFIX + "LOG_DIR"]
        if env.get(ENV_PREFIX + "LOG_LEVEL"):
            values["log_level"] = env[ENV_PREFIX + "LOG_LEVEL"].upper()
        if env.get(ENV_PREFIX + "LOG_TO_FILE"):
            values["log_to_file"] = env[ENV_PREFIX + "LOG_TO_FILE"].strip().lower() in ("1", "true", "yes", "on")

        return StoreConfig(**values)
