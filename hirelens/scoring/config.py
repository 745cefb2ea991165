from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from hirelens.scoring.engine import DEFAULT_RULES, ScoringRules

logger = logging.getLogger(__name__)

_SCORING_CONFIG_CACHE: dict[str, Any] | None = None
_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "scoring.yaml"


def _config_path() -> tuple[Path, bool]:
    override = (os.getenv("SCORING_CONFIG_PATH") or "").strip()
    if override:
        return Path(override), True
    return _DEFAULT_CONFIG_PATH, False


def get_scoring_config() -> dict[str, Any]:
    """Load scoring config from config/scoring.yaml and cache it."""
    global _SCORING_CONFIG_CACHE

    if _SCORING_CONFIG_CACHE is not None:
        return _SCORING_CONFIG_CACHE

    path, explicit = _config_path()
    if not path.exists():
        if explicit:
            raise RuntimeError(f"Scoring config not found at '{path}' (SCORING_CONFIG_PATH).")
        logger.info("scoring_config_missing path=%s using_defaults=1", path)
        _SCORING_CONFIG_CACHE = {}
        return _SCORING_CONFIG_CACHE

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': expected a top-level mapping.")

    _SCORING_CONFIG_CACHE = parsed
    return _SCORING_CONFIG_CACHE


def clear_scoring_config_cache() -> None:
    global _SCORING_CONFIG_CACHE
    _SCORING_CONFIG_CACHE = None


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Get nested config value using dot path notation, e.g. 'salary.base'."""
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def _pairs(raw: Any, key_name: str, value_name: str, default: tuple) -> tuple:
    if not isinstance(raw, list):
        return default
    pairs = []
    for item in raw:
        if not isinstance(item, dict) or key_name not in item or value_name not in item:
            raise RuntimeError(f"Invalid scoring config entry {item!r}: expected '{key_name}' and '{value_name}'.")
        key = item[key_name]
        pairs.append((key if isinstance(key, str) else float(key), float(item[value_name])))
    return tuple(pairs)


def load_scoring_rules() -> ScoringRules:
    d = DEFAULT_RULES
    rules = ScoringRules(
        salary_base=float(get_scoring_value("salary.base", d.salary_base)),
        salary_tight_spread=float(get_scoring_value("salary.tight_spread", d.salary_tight_spread)),
        salary_tight_bonus=float(get_scoring_value("salary.tight_bonus", d.salary_tight_bonus)),
        salary_moderate_spread=float(get_scoring_value("salary.moderate_spread", d.salary_moderate_spread)),
        salary_moderate_bonus=float(get_scoring_value("salary.moderate_bonus", d.salary_moderate_bonus)),
        location_points=_pairs(get_scoring_value("location.points"), "type", "points", d.location_points),
        cost_of_living_max=float(get_scoring_value("cost_of_living.max_points", d.cost_of_living_max)),
        freshness_tiers=_pairs(get_scoring_value("freshness.tiers"), "max_age_days", "points", d.freshness_tiers),
    )
    if abs(rules.max_total - 100.0) > 1e-9:
        logger.warning("scoring_rules_max_total=%.2f expected=100", rules.max_total)
    return rules
