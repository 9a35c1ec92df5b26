from __future__ import annotations

"""Configuration loading and access helpers.

This module centralises the declarative settings of the preview (logging
setup, extra ``@rend`` synonyms, default rendering mode). It loads YAML files
packaged with *qzh_preview* and merges them with optional user overrides.

Override directory: ``$QZH_PREVIEW_CONFIG_DIR`` if set, else
``~/.qzh_preview``. Missing override files are simply skipped.
"""

import importlib.resources as pkg_resources
import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager"]


def _get_user_config_dir() -> Path:
    """Get the directory holding user overrides."""
    override = os.environ.get("QZH_PREVIEW_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".qzh_preview"


class _Singleton(type):
    _instance: "ConfigManager" | None = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance

    def reset(cls) -> None:
        """Drop the cached instance so the next call reloads from disk."""
        cls._instance = None


class ConfigManager(metaclass=_Singleton):
    """Lazy-loads and exposes configuration sections as dictionaries."""

    _DEFAULT_FILENAMES = {
        "logging": "logging.yml",
        "rendition_map": "rendition_map.yml",
        "preview": "preview.yml",
    }

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Any]] = {}
        self._ensure_loaded()

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    def get_logging_config(self) -> Dict[str, Any]:
        return self._data.get("logging", {})

    def get_rendition_map(self) -> Dict[str, str]:
        """Extra ``token -> class`` synonyms added to the built-in table."""
        synonyms = self._data.get("rendition_map", {}).get("synonyms") or {}
        return {str(k).lower(): str(v) for k, v in synonyms.items()}

    def get_preview_config(self) -> Dict[str, Any]:
        return self._data.get("preview", {})

    # ------------------------------------------------------------------
    # Internal loading logic
    # ------------------------------------------------------------------
    def _ensure_loaded(self) -> None:
        if self._data:
            return  # already loaded

        startup_summary = []
        user_config_dir = _get_user_config_dir()

        for key, filename in self._DEFAULT_FILENAMES.items():
            merged_cfg: Dict[str, Any] = {}
            status = "missing"

            # 1. load packaged default
            try:
                resource = pkg_resources.files(__package__).joinpath(filename)
                packaged_data = yaml.safe_load(resource.read_text(encoding="utf-8")) or {}
                merged_cfg.update(packaged_data)
                status = "loaded"
            except (FileNotFoundError, OSError):
                logger.error("Missing packaged config for %s (%s)", key, filename)
                status = "missing"
            except yaml.YAMLError as exc:
                logger.error("Invalid packaged config for %s (%s): %s", key, filename, exc)
                status = "invalid"

            # 2. load user overrides
            user_path = user_config_dir / filename
            if user_path.is_file():
                try:
                    user_data = yaml.safe_load(user_path.read_text(encoding="utf-8")) or {}
                    merged_cfg.update(user_data)
                    if status == "loaded":
                        status = "loaded+overrides"
                except (OSError, yaml.YAMLError) as exc:
                    logger.error("Could not parse user config %s: %s", user_path, exc)

            self._data[key] = merged_cfg
            startup_summary.append(f"{key}: {status}")

        logger.info("Config startup: %s", " | ".join(startup_summary))
