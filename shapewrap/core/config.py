"""
Runtime settings.

Reads an optional YAML/JSON settings file, then applies environment overrides.

Settings file format (YAML or JSON):
    strict_types: true
    shape_cache_enabled: true
    plugins_dir: /opt/shapewrap/wrappers

Environment variables:
    SHAPEWRAP_CONFIG_FILE   path to the settings file (optional).
                              Default search path: <project_root>/shapewrap.yaml
    SHAPEWRAP_STRICT_TYPES  "0"/"1", dynamic type matching on build/set
    SHAPEWRAP_SHAPE_CACHE   "0"/"1", cache derived shapes per type
    SHAPEWRAP_PLUGINS_DIR   extra directory scanned for wrapper plugins
"""
from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ValidationError

_log = logging.getLogger("shapewrap.config")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class Settings(BaseModel):
    strict_types: bool = True
    shape_cache_enabled: bool = True
    plugins_dir: Optional[str] = None


def _env_bool(name: str) -> Optional[bool]:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return None
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    _log.warning("Ignoring %s=%r (expected 0/1/true/false)", name, raw)
    return None


def _resolve_path(path: Optional[Path]) -> Optional[Path]:
    """Determine the settings file path from argument or env var or default."""
    if path is not None:
        return Path(path)
    env_path = os.getenv("SHAPEWRAP_CONFIG_FILE", "").strip()
    if env_path:
        return Path(env_path)
    # Default: project root / shapewrap.yaml
    project_root = Path(__file__).resolve().parents[2]
    return project_root / "shapewrap.yaml"


def load_settings_file(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load raw settings from a YAML or JSON file.

    Returns an empty dict if the file is absent, not readable, or malformed;
    the caller falls back to defaults in that case.
    """
    resolved = _resolve_path(path)
    if resolved is None or not resolved.exists():
        return {}

    try:
        raw_text = resolved.read_text(encoding="utf-8")
    except OSError as exc:
        _log.warning("Cannot read settings file %s: %s", resolved, exc)
        return {}

    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        try:
            import yaml  # type: ignore[import]
            data = yaml.safe_load(raw_text)
        except Exception as exc:
            _log.warning("Failed to parse settings file %s as JSON or YAML: %s", resolved, exc)
            return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        _log.warning("Settings file %s must be a mapping, got %s", resolved, type(data).__name__)
        return {}
    return data


def load_settings(path: Optional[Path] = None) -> Settings:
    """File values first, then environment overrides (highest precedence)."""
    data = load_settings_file(path)
    known = {k: v for k, v in data.items() if k in Settings.model_fields}
    for k in sorted(set(data) - set(known)):
        _log.warning("Ignoring unknown settings key %r", k)

    try:
        settings = Settings(**known)
    except ValidationError as exc:
        _log.warning("Invalid settings file values, using defaults: %s", exc)
        settings = Settings()

    overrides: Dict[str, Any] = {}
    strict = _env_bool("SHAPEWRAP_STRICT_TYPES")
    if strict is not None:
        overrides["strict_types"] = strict
    cache = _env_bool("SHAPEWRAP_SHAPE_CACHE")
    if cache is not None:
        overrides["shape_cache_enabled"] = cache
    plugins_dir = (os.getenv("SHAPEWRAP_PLUGINS_DIR") or "").strip()
    if plugins_dir:
        overrides["plugins_dir"] = plugins_dir

    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings


_SETTINGS: Optional[Settings] = None
_SETTINGS_LOCK = threading.Lock()


def get_settings() -> Settings:
    global _SETTINGS
    with _SETTINGS_LOCK:
        if _SETTINGS is None:
            _SETTINGS = load_settings()
        return _SETTINGS


def reset_settings() -> None:
    global _SETTINGS
    with _SETTINGS_LOCK:
        _SETTINGS = None
