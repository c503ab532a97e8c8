from __future__ import annotations

"""Configuration loading and access helpers.

Loads the YAML files packaged with *officify* and merges them with user
overrides:

On Windows: ``%LOCALAPPDATA%\\Officify\\config\\*.yml``
On Unix: ``~/.officify/*.yml``

``OFFICIFY_CONFIG_DIR`` replaces the user directory when set.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager", "get_user_config_dir"]


def get_user_config_dir() -> Path:
    """Get the user configuration directory."""
    override = os.environ.get("OFFICIFY_CONFIG_DIR")
    if override:
        return Path(override)
    if os.name == 'nt':
        local_appdata = os.environ.get('LOCALAPPDATA')
        if local_appdata:
            return Path(local_appdata) / "Officify" / "config"
        return Path.home() / "AppData" / "Local" / "Officify" / "config"
    return Path.home() / ".officify"


class ConfigManager:
    """Loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "converter": "converter.yml",
        "logging": "logging.yml",
    }

    def __init__(self, user_config_dir: Optional[Path] = None) -> None:
        self._user_config_dir = Path(user_config_dir) if user_config_dir else get_user_config_dir()
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_converter_config(self) -> Dict[str, Any]:
        return self._data.get("converter", {})

    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    @property
    def soffice_path(self) -> Optional[str]:
        value = self.get_converter_config().get("soffice_path")
        return str(value) if value else None

    @property
    def strict_resolution(self) -> bool:
        return bool(self.get_converter_config().get("strict_resolution", False))

    @property
    def scratch_prefix(self) -> str:
        return str(self.get_converter_config().get("scratch_prefix") or "officify-")

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return

        startup_summary = []
        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. packaged default
            try:
                text = pkg_resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")
                merged_cfg.update(yaml.safe_load(text) or {})
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. user overrides
            user_path = self._user_config_dir / filename
            if user_path.exists():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    if not isinstance(user_data, dict):
                        raise yaml.YAMLError(f"expected a mapping, got {type(user_data).__name__}")
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))
