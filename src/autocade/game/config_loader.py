"""
Utilities to load game settings from YAML files.

Settings live in `config/default_config.yaml` under one section per variant.
Values are taken as given; unknown keys are ignored so older files keep
loading.
"""
from pathlib import Path
from typing import Any, Dict, Optional
import logging

from autocade.core import load_yaml
from .x01 import X01Settings
from .around_the_clock import AroundTheClockSettings
from .roulette import RouletteSettings
from .killer import KillerSettings

logger = logging.getLogger(__name__)

# Default location for the application-wide settings
DEFAULT_CONFIG_PATH = Path("config/default_config.yaml")


def _apply_overrides(target: Any, overrides: Dict[str, Any]) -> None:
    """
    Apply dictionary overrides to a settings dataclass.

    Keys may use the feed's camelCase spelling (e.g. `baseScore`).
    """
    for key, value in overrides.items():
        attr = _snake_case(key)
        if hasattr(target, attr):
            setattr(target, attr, value)
        else:
            logger.debug("Ignoring unknown settings key: %s", key)


def _snake_case(key: str) -> str:
    out = []
    for ch in key:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out).replace("-", "_")


def load_game_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load raw settings dictionary from YAML.

    Args:
        config_path: Optional path to YAML file (defaults to DEFAULT_CONFIG_PATH)

    Returns:
        Dictionary with settings sections (empty dict on failure)
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.info("Game settings not found at %s, using defaults", path)
        return {}

    try:
        return load_yaml(path, expect=dict)
    except ValueError:
        logger.warning("Game settings in %s are not a mapping, using defaults", path)
        return {}
    except Exception as exc:  # YAML/IO errors fall back to defaults
        logger.warning("Failed to load game settings from %s: %s", path, exc)
        return {}


def build_x01_settings(settings: Optional[Dict[str, Any]] = None) -> X01Settings:
    x01 = X01Settings()
    _apply_overrides(x01, (settings or {}).get("x01") or {})
    return x01


def build_around_the_clock_settings(settings: Optional[Dict[str, Any]] = None) -> AroundTheClockSettings:
    settings = settings or {}
    atc = AroundTheClockSettings()
    _apply_overrides(atc, settings.get("around_the_clock") or settings.get("atc") or {})
    return atc


def build_roulette_settings(settings: Optional[Dict[str, Any]] = None) -> RouletteSettings:
    roulette = RouletteSettings()
    _apply_overrides(roulette, (settings or {}).get("roulette") or {})
    return roulette


def build_killer_settings(settings: Optional[Dict[str, Any]] = None) -> KillerSettings:
    killer = KillerSettings()
    _apply_overrides(killer, (settings or {}).get("killer") or {})
    return killer
