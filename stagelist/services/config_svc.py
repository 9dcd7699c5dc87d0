#!/usr/bin/env python3
# ======================================================================
#  Config Service - Configuration loading and caching
#  - Loads config from defaults, YAML files, env vars and overrides
#  - Caches composed config for performance
#  - Provides reload() for runtime changes
# ======================================================================

from __future__ import annotations

import logging
import os
from typing import Any

import yaml

from stagelist.__version__ import __version__
from stagelist.helpers.dto.config_dto import ArangoSettings, GetInternalInfoResult, SetListSettings
from stagelist.helpers.dto.gesture_dto import GestureThresholds

# ======================================================================
# Internal Constants (Not User-Configurable)
# ======================================================================

INTERNAL_API_PREFIX = "/api"
INTERNAL_MAX_FLEXIBLE_SLOTS = 10  # Hard ceiling for setlist.max_flexible_slots
INTERNAL_ENV_PREFIX = "STAGELIST_"
INTERNAL_CONFIG_PATH_ENV = "STAGELIST_CONFIG"


class ConfigService:
    """
    Service for loading and caching application configuration.

    Loads config from multiple sources (defaults → YAML → env → overrides),
    caches the result, and provides reload capability.
    """

    def __init__(self, overrides: dict[str, Any] | None = None) -> None:
        self._overrides = overrides or {}
        self._config: dict[str, Any] | None = None
        self._logger = logging.getLogger(__name__)

    def get_config(self, force_reload: bool = False) -> dict[str, Any]:
        """
        Get the composed configuration.

        Args:
            force_reload: If True, bypass cache and reload from sources

        Returns:
            Complete configuration dict
        """
        if self._config is None or force_reload:
            self._config = self._compose(self._overrides)
        return self._config

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a config value by dotted path.

        Example:
            >>> service.get("setlist.max_conflict_retries")
            3
            >>> service.get("gestures.unknown", 5)
            5
        """
        node: Any = self.get_config()
        for part in key_path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def reload(self) -> dict[str, Any]:
        self._logger.info("[ConfigService] Reloading configuration from all sources")
        return self.get_config(force_reload=True)

    def get_internal_info(self) -> GetInternalInfoResult:
        return GetInternalInfoResult(
            version=__version__,
            api_prefix=INTERNAL_API_PREFIX,
            max_flexible_slots_hard_limit=INTERNAL_MAX_FLEXIBLE_SLOTS,
        )

    def make_setlist_settings(self) -> SetListSettings:
        """
        Build SetListSettings from the current configuration.

        This is the boundary where raw config values are validated and
        clamped before they reach the services.
        """
        retries = int(self.get("setlist.max_conflict_retries", 3))
        slots = int(self.get("setlist.max_flexible_slots", INTERNAL_MAX_FLEXIBLE_SLOTS))
        roles = self.get("setlist.elevated_roles") or ["leader", "operator"]
        if isinstance(roles, str):
            roles = [r.strip() for r in roles.split(",")]
        return SetListSettings(
            max_conflict_retries=max(0, retries),
            max_flexible_slots=max(1, min(slots, INTERNAL_MAX_FLEXIBLE_SLOTS)),
            elevated_roles=frozenset(str(r) for r in roles if r),
        )

    def make_gesture_thresholds(self) -> GestureThresholds:
        g = self.get("gestures") or {}
        return GestureThresholds(
            min_swipe_distance=float(g.get("min_swipe_distance", 80)),
            complete_threshold=float(g.get("complete_threshold", 60)),
            delete_threshold=float(g.get("delete_threshold", 60)),
            drag_start_distance=float(g.get("drag_start_distance", 10)),
            drop_margin=float(g.get("drop_margin", 50)),
        )

    def make_arango_settings(self) -> ArangoSettings:
        a = self.get("arango") or {}
        return ArangoSettings(
            hosts=str(a.get("hosts", "http://localhost:8529")),
            username=str(a.get("username", "stagelist")),
            password=str(a.get("password", "")),
            db_name=str(a.get("db_name", "stagelist")),
        )

    # ----------------------------------------------------------------------
    # Private composition logic
    # ----------------------------------------------------------------------

    def _compose(self, overrides: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Load final configuration from:
          1) Built-in defaults
          2) ./config/config.yaml (if present)
          3) $STAGELIST_CONFIG (if set)
          4) Environment variables (STAGELIST_<SECTION>_<KEY>)
          5) overrides dict passed in

        Returns merged config as dict.
        """
        cfg = self._default_config()

        repo_cfg = self._load_yaml(os.path.join(os.getcwd(), "config", "config.yaml"))
        if repo_cfg:
            self._deep_merge(cfg, repo_cfg)

        env_path = os.getenv(INTERNAL_CONFIG_PATH_ENV)
        if env_path:
            self._deep_merge(cfg, self._load_yaml(env_path))

        self._apply_env_overrides(cfg)

        if overrides:
            self._deep_merge(cfg, overrides)

        self._logger.debug(f"[ConfigService] compose() loaded config; sections: {list(cfg.keys())}")
        return cfg

    def _default_config(self) -> dict[str, Any]:
        """Base defaults for user-configurable settings only."""
        return {
            "arango": {
                "hosts": "http://localhost:8529",
                "username": "stagelist",
                "password": "",
                "db_name": "stagelist",
            },
            "setlist": {
                "max_conflict_retries": 3,
                "max_flexible_slots": 10,
                "elevated_roles": ["leader", "operator"],
            },
            "gestures": {
                "min_swipe_distance": 80,
                "complete_threshold": 60,
                "delete_threshold": 60,
                "drag_start_distance": 10,
                "drop_margin": 50,
            },
            "api": {
                "host": "0.0.0.0",
                "port": 8400,
                "store": "memory",  # "memory" or "arango"
                "tokens": {},  # token -> {nickname, role}
            },
        }

    def _deep_merge(self, a: dict[str, Any], b: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge dict b into dict a (mutates a, returns it)."""
        for k, v in b.items():
            if isinstance(v, dict) and isinstance(a.get(k), dict):
                self._deep_merge(a[k], v)
            else:
                a[k] = v
        return a

    def _load_yaml(self, path: str) -> dict[str, Any]:
        """Load a YAML file; returns {} if not found or invalid."""
        if not path or not os.path.exists(path):
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self._logger.warning(f"[ConfigService] Ignoring unreadable config file {path}: {e}")
            return {}
        if not isinstance(data, dict):
            self._logger.warning(f"[ConfigService] Ignoring {path}: top level is not a mapping")
            return {}
        return data

    def _apply_env_overrides(self, cfg: dict[str, Any]) -> None:
        """
        Apply STAGELIST_<SECTION>_<KEY> overrides for known keys only.

        Supported formats:
          STAGELIST_ARANGO_HOSTS=http://arangodb:8529
          STAGELIST_SETLIST_MAX_CONFLICT_RETRIES=5
          STAGELIST_SETLIST_ELEVATED_ROLES=leader,operator,host
          STAGELIST_GESTURES_MIN_SWIPE_DISTANCE=100
          STAGELIST_API_PORT=9000
        """
        for k, v in os.environ.items():
            if not k.startswith(INTERNAL_ENV_PREFIX) or k == INTERNAL_CONFIG_PATH_ENV:
                continue
            rest = k[len(INTERNAL_ENV_PREFIX) :].lower()
            section, _, key = rest.partition("_")
            if not isinstance(cfg.get(section), dict) or key not in cfg[section]:
                self._logger.debug(f"[ConfigService] Ignoring environment override for unknown key: {k}")
                continue
            default = cfg[section][key]
            cfg[section][key] = self._parse_env_value(v, default)

    @staticmethod
    def _parse_env_value(value: str, default: Any) -> Any:
        if isinstance(default, list):
            return [part.strip() for part in value.split(",") if part.strip()]
        if value.lower() in ("true", "false"):
            return value.lower() == "true"
        if value.isdigit():
            return int(value)
        if value.replace(".", "", 1).replace("-", "", 1).isdigit():
            return float(value)
        return value
