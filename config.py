import json
import logging
from pathlib import Path

DEFAULT_CONFIG = {
    "variant": "basic",
    "node_budgets": {
        "basic": 100_000,
        "enhanced": 500_000,
    },
    "depths": {"early": 7, "mid": 8, "late": 12},
    "max_depth": None,
}

_NESTED_KEYS = ("node_budgets", "depths")


def _defaults() -> dict:
    merged = DEFAULT_CONFIG.copy()
    for key in _NESTED_KEYS:
        merged[key] = DEFAULT_CONFIG[key].copy()
    return merged


def load_config(path: str = "config.json") -> dict:
    p = Path(path)
    if not p.exists():
        return _defaults()
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logging.warning(f"[Config] Could not read {p}: {e} - using defaults")
        return _defaults()
    if not isinstance(data, dict):
        logging.warning(f"[Config] {p} is not a JSON object - using defaults")
        return _defaults()

    # Merge with defaults (shallow merge)
    merged = _defaults()
    merged.update({k: v for k, v in data.items() if v is not None})
    # Merge nested tables if present
    for key in _NESTED_KEYS:
        if isinstance(data.get(key), dict):
            nested = _defaults()[key]
            nested.update(data[key])
            merged[key] = nested
        else:
            merged[key] = _defaults()[key]
    return merged
