"""
Scan configuration for jsscan, loaded from an optional YAML file.

Keys:
    base_url (str): Directory prefix shared by every mapped module location.
    module_map (dict[str, str]): Logical module prefix -> path segment under
        `base_url`, tried in file order.

Example config.yaml:
    base_url: /srv/web/dojo/
    module_map:
      dojo: dojo
      dijit: dijit
"""

from __future__ import annotations

import logging
import os
from dataclasses import MISSING, dataclass, field, fields
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@dataclass
class ScanConfig:
    """Settings used to turn file paths into module ids."""

    base_url: str = ""
    module_map: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanConfig":
        """Builds a config from plain data, rejecting unknown keys.

        Raises:
            ValueError: If `data` holds a key that is not a config field, or a
                value of the wrong shape.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        module_map = data.get("module_map") or {}
        if not isinstance(module_map, dict):
            raise ValueError("module_map must be a mapping")
        return cls(
            base_url=str(data.get("base_url") or ""),
            module_map={str(k): str(v) for k, v in module_map.items()},
        )


def config_defaults() -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for f in fields(ScanConfig):
        if f.default is not MISSING:
            defaults[f.name] = f.default
        elif f.default_factory is not MISSING:
            defaults[f.name] = f.default_factory()
    return defaults


def load_config(path: str | None = None) -> ScanConfig:
    """Load configuration from a YAML file merged over the defaults.

    Args:
        path: The YAML file to read, or None for the defaults alone.

    Returns:
        ScanConfig: The merged configuration.

    Raises:
        FileNotFoundError: If `path` is given but does not exist.
        ValueError: If the file is not valid YAML, not a mapping, or holds
            unknown keys.
    """
    config = config_defaults()
    if path is None:
        return ScanConfig.from_dict(config)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    logger.debug("Loaded config from %s", path)
    config.update(data)
    return ScanConfig.from_dict(config)
