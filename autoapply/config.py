"""Load automation settings from YAML, .env and command-line overrides."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from autoapply.log import get_logger

log = get_logger(__name__)

load_dotenv()

CONFIG_DIR: Path = Path(__file__).resolve().parent.parent / "config"
CONFIG_PATH: Path = CONFIG_DIR / "automation.yaml"

# Option names accepted in the YAML file, mapped onto AutomationConfig fields.
_KEY_ALIASES: dict[str, str] = {
    "keywords": "keywords",
    "location": "location",
    "delay": "delay_ms",
    "delayMs": "delay_ms",
    "maxApplications": "max_applications",
    "easyApplyOnly": "easy_apply_only",
    "blacklistCompanies": "blacklist_companies",
    "blacklistTitles": "blacklist_titles",
    "autoScroll": "auto_scroll",
    "verbose": "verbose",
    "maxWizardSteps": "max_wizard_steps",
    "headless": "headless",
    "jitterBaseMs": "jitter_base_ms",
    "jitterSpreadMs": "jitter_spread_ms",
}


class ConfigError(ValueError):
    """Raised when the automation settings are unusable."""


@dataclass(frozen=True)
class AutomationConfig:
    keywords: str = ""
    location: str = ""
    delay_ms: int = 3000
    max_applications: int = 10
    easy_apply_only: bool = True
    blacklist_companies: tuple[str, ...] = ()
    blacklist_titles: tuple[str, ...] = ()
    auto_scroll: bool = True
    verbose: bool = True
    max_wizard_steps: int = 10
    headless: bool = False
    jitter_base_ms: int = 2000
    jitter_spread_ms: int = 3000

    def __post_init__(self) -> None:
        # Lists from YAML are frozen so the config stays immutable.
        object.__setattr__(self, "blacklist_companies", _as_tuple(self.blacklist_companies, "blacklist_companies"))
        object.__setattr__(self, "blacklist_titles", _as_tuple(self.blacklist_titles, "blacklist_titles"))
        for name in ("delay_ms", "max_applications", "jitter_base_ms", "jitter_spread_ms"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigError(f"{name} must be >= 0, got {value}")
        if isinstance(self.max_wizard_steps, bool) or not isinstance(self.max_wizard_steps, int) or self.max_wizard_steps < 1:
            raise ConfigError(f"max_wizard_steps must be a positive integer, got {self.max_wizard_steps!r}")
        for name in ("easy_apply_only", "auto_scroll", "verbose", "headless"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false, got {getattr(self, name)!r}")

    def with_overrides(self, **overrides: Any) -> AutomationConfig:
        """Return a copy with the non-None *overrides* applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _as_tuple(value: Any, name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    try:
        return tuple(str(v) for v in value)
    except TypeError:
        raise ConfigError(f"{name} must be a list of strings, got {value!r}") from None


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def env_flag(key: str, default: bool = False) -> bool:
    raw = get_env(key)
    if not raw:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


def config_from_mapping(data: dict[str, Any] | None) -> AutomationConfig:
    """Build a config from the raw YAML mapping (camelCase or snake_case keys)."""
    if data is None:
        return AutomationConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"configuration must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(AutomationConfig)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _KEY_ALIASES.get(key, key)
        if name not in known:
            log.warning("Ignoring unknown configuration key: %s", key)
            continue
        kwargs[name] = value
    try:
        return AutomationConfig(**kwargs)
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc


def load_config(path: Path | str | None = None, **overrides: Any) -> AutomationConfig:
    """Read the YAML settings file (if any) and apply *overrides* on top.

    ``RUN_HEADLESS`` in the environment switches the browser to headless mode
    unless an explicit override says otherwise.
    """
    cfg_path = Path(path) if path else CONFIG_PATH
    data: dict[str, Any] | None = None
    if cfg_path.exists():
        with open(cfg_path, "r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ConfigError(f"invalid YAML in {cfg_path}: {exc}") from exc
        log.debug("Loaded configuration from %s", cfg_path)
    elif path:
        raise ConfigError(f"configuration file not found: {cfg_path}")

    config = config_from_mapping(data)
    if overrides.get("headless") is None and env_flag("RUN_HEADLESS"):
        overrides["headless"] = True
    return config.with_overrides(**overrides)
