"""
OpenctxConfig: optional project-level configuration for openctx.

This module provides:

- find_config_file: Walk up directories to locate .openctx.toml
- deep_merge: Recursively merge two dicts (override wins for leaf values)
- CatalogSettings: Typed ``[catalog]`` section
- OpenctxConfig: Main config object with load/apply interface
- load_config: Load one explicit config file

Configuration is read from `.openctx.toml` with optional `.openctx.local.toml`
overrides in the same directory. A missing file is not an error: every setting
has a default.

Example:
    >>> config = OpenctxConfig.load()
    >>> config.catalog.warn_size
    64
    >>> config.apply()  # installs a default catalog built from the settings
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from openctx.catalog import DEFAULT_WARN_SIZE, KeyCatalog, set_default_catalog

CONFIG_FILENAME = ".openctx.toml"
LOCAL_CONFIG_FILENAME = ".openctx.local.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Walk up from *start_dir* to find `.openctx.toml`.

    Args:
        start_dir: Directory to start searching from. Defaults to ``Path.cwd()``.

    Returns:
        Path to the config file, or ``None`` if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            return None
        current = parent


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts. *override* wins for leaf values.

    Neither input is mutated; a new dict is returned.
    """
    merged: dict[str, Any] = {}

    for key in base.keys() | override.keys():
        if key in base and key in override:
            base_val = base[key]
            over_val = override[key]
            if isinstance(base_val, dict) and isinstance(over_val, dict):
                merged[key] = deep_merge(base_val, over_val)
            else:
                merged[key] = over_val
        elif key in base:
            merged[key] = base[key]
        else:
            merged[key] = override[key]

    return merged


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogSettings:
    """
    Typed settings from the ``[catalog]`` table.

    Attributes:
        warn_size: Catalog size above which a one-time warning is logged.
            0 disables the warning.
    """

    warn_size: int = DEFAULT_WARN_SIZE


@dataclass(frozen=True)
class OpenctxConfig:
    """
    Configuration loaded from ``.openctx.toml``.

    Typical usage::

        config = OpenctxConfig.load()
        config.apply()
    """

    catalog: CatalogSettings = field(default_factory=CatalogSettings)
    log_level: str | None = None
    source: Path | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, start_dir: Path | None = None) -> OpenctxConfig:
        """
        Find and load configuration, falling back to defaults.

        Walks up from *start_dir* (default: cwd) to locate ``.openctx.toml``
        and deep-merges ``.openctx.local.toml`` from the same directory if
        present.

        Args:
            start_dir: Directory to start searching from.

        Returns:
            The loaded config, or a default config when no file is found.
        """
        config_path = find_config_file(start_dir)
        if config_path is None:
            return cls()
        return load_config(config_path)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        source: Path | None = None,
    ) -> OpenctxConfig:
        """
        Create an :class:`OpenctxConfig` from a parsed TOML dict.

        Args:
            data: Parsed TOML data (local overrides already merged).
            source: File the data came from, for error messages.

        Returns:
            A validated config.

        Raises:
            ValueError: If a setting is out of range or unrecognized.
        """
        where = f" in {source}" if source is not None else ""

        # -- catalog --
        catalog_raw = data.get("catalog", {})
        warn_size = catalog_raw.get("warn_size", DEFAULT_WARN_SIZE)
        if not isinstance(warn_size, int) or isinstance(warn_size, bool) or warn_size < 0:
            raise ValueError(
                f"catalog.warn_size must be a non-negative integer{where}, "
                f"got {warn_size!r}"
            )

        # -- logging --
        log_level = data.get("logging", {}).get("level")
        if log_level is not None:
            log_level = str(log_level).upper()
            if log_level not in _LOG_LEVELS:
                raise ValueError(
                    f"logging.level must be one of {', '.join(_LOG_LEVELS)}{where}, "
                    f"got {log_level!r}"
                )

        return cls(
            catalog=CatalogSettings(warn_size=warn_size),
            log_level=log_level,
            source=source,
        )

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def apply(self) -> KeyCatalog:
        """
        Apply the settings to the running process.

        Sets the level of the ``openctx`` logger (when configured) and
        installs a new default catalog built from the ``[catalog]`` settings.
        Contexts rooted earlier keep their existing catalog.

        Returns:
            The newly installed default catalog.
        """
        if self.log_level is not None:
            logging.getLogger("openctx").setLevel(self.log_level)
        catalog = KeyCatalog.from_settings(self.catalog)
        set_default_catalog(catalog)
        return catalog


def load_config(path: Path | str) -> OpenctxConfig:
    """
    Load one config file plus its sibling local override file.

    Args:
        path: Path to a ``.openctx.toml`` file.

    Returns:
        The loaded config.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If a setting is invalid.
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    local_path = config_path.parent / LOCAL_CONFIG_FILENAME
    if local_path.is_file():
        with open(local_path, "rb") as f:
            data = deep_merge(data, tomllib.load(f))

    return OpenctxConfig.from_dict(data, source=config_path)
