"""
YAML → EngineConfig loader.

Loads per-user engine settings from defaults.yaml (bundled with the
package) and optionally merges user overrides from
~/.vena-planner/config.yaml.

Usage:
    from vena_planner.core.engine.config_loader import load_engine_config
    cfg = load_engine_config()
    cfg.axial_capacity  # 9000.0 unless overridden

If the bundled YAML cannot be parsed, the Python defaults from config.py
are used (no crash). If the user override file exists but has parse
errors, a warning is emitted and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_AXIAL_CAPACITY, DEFAULT_TRAINING_MAXES, DEFAULT_VOLUME_START, EngineConfig

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; raise ValueError if it is not a mapping."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML value must be a mapping")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _per_lift(raw: Any, defaults: dict[str, float], name: str) -> dict[str, float]:
    """Coerce a {lift: weight} section, keeping defaults for missing lifts."""
    merged = dict(defaults)
    if raw is None:
        return merged
    if not isinstance(raw, dict):
        raise ValueError(f"'{name}' must be a mapping of lift -> weight")
    for lift, weight in raw.items():
        merged[str(lift)] = float(weight)
    return merged


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled defaults.yaml, or None if not found."""
    try:
        ref = importlib.resources.files("vena_planner").joinpath("defaults.yaml")
        with importlib.resources.as_file(ref) as p:
            return p if p.exists() else None
    except (ModuleNotFoundError, FileNotFoundError):
        candidate = Path(__file__).parent.parent.parent / "defaults.yaml"
        return candidate if candidate.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return ~/.vena-planner/config.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".vena-planner" / "config.yaml"
    return p if p.exists() else None


def load_model_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/vena_planner/defaults.yaml
    2. ``user_path`` if given, else ~/.vena-planner/config.yaml

    Returns:
        Merged dict of config sections. Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        try:
            config = _deep_merge(config, _load_yaml_file(bundled))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            warnings.warn(
                f"vena-planner: bundled defaults unreadable ({exc}); using built-in values.",
                stacklevel=2,
            )

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None:
        try:
            config = _deep_merge(config, _load_yaml_file(user))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            warnings.warn(
                f"vena-planner: ignoring user config {user} ({exc})",
                stacklevel=2,
            )

    return config


def engine_config_from_dict(data: dict[str, Any]) -> EngineConfig:
    """
    Build an EngineConfig from a merged config dict.

    Raises:
        ValueError: If a section has the wrong shape or a value is invalid
    """
    engine = data.get("engine") or {}
    return EngineConfig(
        axial_capacity=float(engine.get("axial_capacity", DEFAULT_AXIAL_CAPACITY)),
        volume_defaults=_per_lift(data.get("volume_defaults"), DEFAULT_VOLUME_START, "volume_defaults"),
        training_maxes=_per_lift(data.get("training_maxes"), DEFAULT_TRAINING_MAXES, "training_maxes"),
    )


def load_engine_config(user_path: Path | None = None) -> EngineConfig:
    """Load YAML sources and return the resulting EngineConfig."""
    return engine_config_from_dict(load_model_config(user_path))
