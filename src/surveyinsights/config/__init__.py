"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..schemas.config import AppConfig, load_config


class ConfigManager:
    """YAML-backed configuration loader."""

    def __init__(self, base_path: str | Path):
        self._base_path = Path(base_path)

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML configuration by name without file extension."""
        return load_yaml(self._base_path / f"{name}.yaml")

    def load_app_config(self, name: str) -> AppConfig:
        return load_config(self.load(name))


def load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {path} must contain a YAML mapping")
    return loaded


__all__ = ["ConfigManager", "load_yaml"]
