"""Settings management for sandbox-resolver.

Simple, scope-aware YAML settings. Values from more specific scopes win:
1. local (.sandbox-resolver/settings.local.yaml) - gitignored, machine-specific
2. project (.sandbox-resolver/settings.yaml) - committed, team-shared
3. global (~/.sandbox-resolver/settings.yaml) - user defaults
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Literal

import yaml

from .resolution.scaffold import BASELINE_DEPENDENCIES
from .resolution.scaffold import BASELINE_DEV_DEPENDENCIES
from .resolution.scaffold import Baseline
from .resolution.session import DEFAULT_MAX_CONCURRENCY

logger = logging.getLogger(__name__)

Scope = Literal["local", "project", "global"]

SETTINGS_DIR = ".sandbox-resolver"


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard layout."""
        return cls(
            global_settings=Path.home() / SETTINGS_DIR / "settings.yaml",
            project_settings=Path.cwd() / SETTINGS_DIR / "settings.yaml",
            local_settings=Path.cwd() / SETTINGS_DIR / "settings.local.yaml",
        )


class ResolverSettings:
    """Settings manager with scope-aware merging.

    Usage:
        settings = ResolverSettings()
        registry = settings.get_registry()  # Returns location or None
        settings.set_registry("./registry", scope="project")
    """

    def __init__(self, paths: SettingsPaths | None = None) -> None:
        self.paths = paths or SettingsPaths.default()

    def get_merged_settings(self) -> dict[str, Any]:
        """Load and merge settings from all scopes."""
        result: dict[str, Any] = {}
        for path in [self.paths.global_settings, self.paths.project_settings, self.paths.local_settings]:
            if path.exists():
                try:
                    with open(path) as f:
                        content = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as e:
                    logger.warning(f"Skipping malformed settings file {path}: {e}")
                    continue
                if not isinstance(content, dict):
                    logger.warning(f"Skipping settings file {path}: expected a mapping")
                    continue
                result = self._deep_merge(result, content)
        return result

    # ----- Registry settings -----

    def get_registry(self) -> str | None:
        """Get location (directory or URL) of the component registry."""
        return self.get_merged_settings().get("registry")

    def set_registry(self, location: str, scope: Scope = "global") -> None:
        """Set the component registry location at specified scope."""
        self._update_setting("registry", location, scope)

    def get_entry_registry(self) -> str | None:
        """Get location of the registry holding entry components."""
        return self.get_merged_settings().get("entry_registry")

    def set_entry_registry(self, location: str, scope: Scope = "global") -> None:
        """Set the entry registry location at specified scope."""
        self._update_setting("entry_registry", location, scope)

    # ----- Resolution settings -----

    def get_max_concurrency(self) -> int:
        """Get the bound on simultaneous registry fetches."""
        value = self.get_merged_settings().get("max_concurrency", DEFAULT_MAX_CONCURRENCY)
        try:
            return max(1, int(value))
        except (TypeError, ValueError):
            logger.warning(f"Invalid max_concurrency setting {value!r}, using {DEFAULT_MAX_CONCURRENCY}")
            return DEFAULT_MAX_CONCURRENCY

    def get_baseline(self) -> Baseline:
        """Get baseline manifests, with configured entries layered over the defaults."""
        configured = _as_mapping(self.get_merged_settings().get("baseline"), "baseline")
        return Baseline(
            dependencies={
                **BASELINE_DEPENDENCIES,
                **_as_mapping(configured.get("dependencies"), "baseline.dependencies"),
            },
            dev_dependencies={
                **BASELINE_DEV_DEPENDENCIES,
                **_as_mapping(configured.get("dev_dependencies"), "baseline.dev_dependencies"),
            },
        )

    # ----- Scope utilities -----

    def _get_scope_path(self, scope: Scope) -> Path:
        """Get settings file path for scope."""
        return {
            "local": self.paths.local_settings,
            "project": self.paths.project_settings,
            "global": self.paths.global_settings,
        }[scope]

    def _read_scope(self, scope: Scope) -> dict[str, Any]:
        """Read settings from a specific scope."""
        path = self._get_scope_path(scope)
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable settings file {path}: {e}")
            return {}
        if not isinstance(content, dict):
            logger.warning(f"Ignoring settings file {path}: expected a mapping")
            return {}
        return content

    def _write_scope(self, scope: Scope, settings: dict[str, Any]) -> None:
        """Write settings to a specific scope."""
        path = self._get_scope_path(scope)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(settings, f, default_flow_style=False)

    def _update_setting(self, key: str, value: Any, scope: Scope) -> None:
        """Update a single setting at specified scope."""
        settings = self._read_scope(scope)
        settings[key] = value
        self._write_scope(scope, settings)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dicts, overlay wins."""
        result = base.copy()
        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def _as_mapping(value: Any, key: str) -> dict[str, Any]:
    """Return a settings value that must be a mapping, or {} with a warning."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning(f"Ignoring '{key}' setting: expected a mapping, got {type(value).__name__}")
        return {}
    return value


def get_settings() -> ResolverSettings:
    """Get a settings instance with default paths."""
    return ResolverSettings()
