"""
Configuration management for the Steam Market Manager.
Handles lookup defaults, cache settings, API keys and persistence.
"""

import json
import logging
import copy
import os
from pathlib import Path
from typing import Optional, Dict, Any, Tuple, Union

from core.constants import (
    API_TIMEOUT_CONNECT,
    API_TIMEOUT_READ,
    BACKPACK_TF_REFRESH_INTERVAL,
    CACHE_FILE_DEFAULT,
    CACHE_TTL_DEFAULT,
    CACHE_TTL_MAX,
    DEFAULT_USER_AGENT,
    WEB_API_PORT_DEFAULT,
    WEB_API_SEPARATOR_DEFAULT,
)
from core.currencies import Currency, DEFAULT_CURRENCY

logger = logging.getLogger(__name__)

# Environment variable -> (section, key)
ENV_OVERRIDES: Dict[str, Tuple[str, str]] = {
    "STEAM_MARKET_APP_ID": ("market", "app_id"),
    "STEAM_MARKET_CURRENCY": ("market", "currency"),
    "STEAM_MARKET_CACHE_TTL": ("cache", "ttl_seconds"),
    "STEAM_MARKET_CACHE_FILE": ("cache", "file"),
    "BACKPACK_TF_API_KEY": ("backpack_tf", "api_key"),
    "STEAM_MARKET_WEB_API_PORT": ("web_api", "port"),
}


def get_config_dir() -> Path:
    """
    Get the application config directory.

    Returns:
        Path to the config directory (~/.steam_market_manager/)
    """
    config_dir = Path.home() / ".steam_market_manager"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


class Config:
    """
    Application configuration with JSON persistence.

    Key ideas:
    - The backing store is a JSON file on disk; a missing file means defaults.
    - Environment variables (ENV_OVERRIDES) and explicit overrides win over
      the file but are never written back by save().
    - Accessors apply guardrails so callers always get usable values.
    """

    # NOTE: This structure is treated as immutable. Always use
    # _default_config_deepcopy() when you need a fresh copy of defaults.
    DEFAULT_CONFIG: Dict[str, Any] = {
        "market": {
            # Steam application id (730 = CS2, 440 = TF2, 570 = Dota 2)
            "app_id": None,
            # Wallet currency name or code
            "currency": DEFAULT_CURRENCY.name,
            # Return prices as Steam formats them ("1,23€") instead of Decimal
            "keep_currency_symbols": False,
        },
        "cache": {
            # Max age of a cached price in seconds; 0 disables the cache
            "ttl_seconds": CACHE_TTL_DEFAULT,
            "file": CACHE_FILE_DEFAULT,
        },
        "backpack_tf": {
            "api_key": "",
            # Minimum seconds between two price list downloads
            "refresh_interval_seconds": BACKPACK_TF_REFRESH_INTERVAL,
        },
        "api": {
            "user_agent": DEFAULT_USER_AGENT,
            # Requests accepts (connect, read); stored separately for clarity
            "timeouts": {
                "connect": API_TIMEOUT_CONNECT,
                "read": API_TIMEOUT_READ,
            },
        },
        "web_api": {
            "port": WEB_API_PORT_DEFAULT,
            "separator": WEB_API_SEPARATOR_DEFAULT,
        },
    }

    def __init__(
        self,
        config_file: Optional[Path] = None,
        overrides: Optional[Dict[str, Dict[str, Any]]] = None,
        use_env: bool = True,
    ) -> None:
        """
        Initialize configuration.

        Args:
            config_file: Optional path to config JSON file. When omitted,
                         ~/.steam_market_manager/config.json is used.
            overrides: {section: {key: value}} applied on top of the file.
            use_env: Read ENV_OVERRIDES from the environment.
        """
        self.config_file: Path = self._resolve_config_path(config_file)

        # Load data from disk (or defaults)
        self.data: Dict[str, Any] = self._load()
        self._overrides: Dict[str, Dict[str, Any]] = {}
        if use_env:
            self._apply_env()
        for section, values in (overrides or {}).items():
            self._overrides.setdefault(section, {}).update(values)
        logger.info(f"Config loaded from {self.config_file}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_config_path(config_file: Optional[Union[str, Path]]) -> Path:
        if config_file is not None:
            return Path(config_file)
        return get_config_dir() / "config.json"

    def _load(self) -> Dict[str, Any]:
        """Load configuration from JSON file, merging with defaults."""
        if self.config_file.exists():
            try:
                with self.config_file.open("r", encoding="utf-8") as f:
                    raw = json.load(f)

                merged = self._merge_with_defaults(raw)
                logger.info("Configuration loaded successfully")
                return merged
            except (OSError, ValueError, AttributeError) as exc:
                logger.error(f"Failed to load config: {exc}. Using defaults.")
                return self._default_config_deepcopy()
        else:
            logger.info("No config file found, using defaults")
            return self._default_config_deepcopy()

    @classmethod
    def _default_config_deepcopy(cls) -> Dict[str, Any]:
        return copy.deepcopy(cls.DEFAULT_CONFIG)

    def _merge_with_defaults(self, user_config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge user config with defaults so new keys appear per section."""
        merged = self._default_config_deepcopy()

        for key, value in user_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key].update(value)
            else:
                merged[key] = value

        return merged

    def _apply_env(self) -> None:
        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value:
                self._overrides.setdefault(section, {})[key] = value

    def _get(self, section: str, key: str, default: Any = None) -> Any:
        if key in self._overrides.get(section, {}):
            return self._overrides[section][key]
        return (self.data.get(section) or {}).get(key, default)

    def _set(self, section: str, key: str, value: Any) -> None:
        self._overrides.get(section, {}).pop(key, None)
        self.data.setdefault(section, {})[key] = value
        self.save()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Persist the current configuration to the config file."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with self.config_file.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, ensure_ascii=False)
            logger.info("Configuration saved")
        except OSError as exc:
            logger.error(f"Failed to save config: {exc}")

    # ------------------------------------------------------------------
    # Market lookup defaults
    # ------------------------------------------------------------------

    @property
    def app_id(self) -> Optional[int]:
        """Default Steam application id, or None when unset."""
        value = self._get("market", "app_id")
        try:
            return int(value) if value not in (None, "") else None
        except (TypeError, ValueError):
            logger.warning(f"Invalid app_id {value!r} in config, ignoring")
            return None

    @app_id.setter
    def app_id(self, value: Optional[int]) -> None:
        self._set("market", "app_id", value)

    @property
    def currency(self) -> Currency:
        """Default wallet currency (EUR when unset or unknown)."""
        value = self._get("market", "currency")
        currency = Currency.from_value(value)
        if currency is None:
            logger.warning(f"Unknown currency {value!r} in config, using {DEFAULT_CURRENCY}")
            return DEFAULT_CURRENCY
        return currency

    @currency.setter
    def currency(self, value: Currency) -> None:
        self._set("market", "currency", value.name)

    @property
    def keep_currency_symbols(self) -> bool:
        return bool(self._get("market", "keep_currency_symbols", False))

    @keep_currency_symbols.setter
    def keep_currency_symbols(self, value: bool) -> None:
        self._set("market", "keep_currency_symbols", bool(value))

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    @property
    def cache_ttl_seconds(self) -> int:
        """
        Cache TTL in seconds.

        GUARDRAIL: negative/invalid values disable the cache, values above
        CACHE_TTL_MAX are clamped. ``False`` reads as 0.
        """
        value = self._get("cache", "ttl_seconds", CACHE_TTL_DEFAULT)
        try:
            ttl = int(value or 0)
        except (TypeError, ValueError):
            logger.warning(f"Invalid cache ttl {value!r}, disabling cache")
            return 0
        return max(0, min(ttl, CACHE_TTL_MAX))

    @cache_ttl_seconds.setter
    def cache_ttl_seconds(self, value: int) -> None:
        self._set("cache", "ttl_seconds", int(value))

    @property
    def cache_enabled(self) -> bool:
        return self.cache_ttl_seconds > 0

    @property
    def cache_file(self) -> Path:
        return Path(self._get("cache", "file") or CACHE_FILE_DEFAULT).expanduser()

    @cache_file.setter
    def cache_file(self, value: Union[str, Path]) -> None:
        self._set("cache", "file", str(value))

    # ------------------------------------------------------------------
    # backpack.tf
    # ------------------------------------------------------------------

    @property
    def backpack_tf_api_key(self) -> Optional[str]:
        return self._get("backpack_tf", "api_key") or None

    @backpack_tf_api_key.setter
    def backpack_tf_api_key(self, value: str) -> None:
        self._set("backpack_tf", "api_key", value or "")

    @property
    def refresh_interval_seconds(self) -> int:
        """
        Minimum seconds between price list downloads.

        GUARDRAIL: never below 0.
        """
        value = self._get("backpack_tf", "refresh_interval_seconds", BACKPACK_TF_REFRESH_INTERVAL)
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            return BACKPACK_TF_REFRESH_INTERVAL

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    @property
    def user_agent(self) -> str:
        return self._get("api", "user_agent") or DEFAULT_USER_AGENT

    @property
    def timeouts(self) -> Tuple[float, float]:
        """(connect, read) timeouts, each at least 1 second."""
        timeouts = self._get("api", "timeouts") or {}
        connect = timeouts.get("connect", API_TIMEOUT_CONNECT)
        read = timeouts.get("read", API_TIMEOUT_READ)
        try:
            return (max(1.0, float(connect)), max(1.0, float(read)))
        except (TypeError, ValueError):
            return (float(API_TIMEOUT_CONNECT), float(API_TIMEOUT_READ))

    # ------------------------------------------------------------------
    # Web API
    # ------------------------------------------------------------------

    @property
    def web_api_port(self) -> int:
        value = self._get("web_api", "port", WEB_API_PORT_DEFAULT)
        try:
            port = int(value)
        except (TypeError, ValueError):
            return WEB_API_PORT_DEFAULT
        return port if 0 < port < 65536 else WEB_API_PORT_DEFAULT

    @property
    def web_api_separator(self) -> str:
        return self._get("web_api", "separator") or WEB_API_SEPARATOR_DEFAULT
