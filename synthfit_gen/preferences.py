"""Persisted user preferences behind an async key-value store.

Stored payloads are JSON. Anything that fails to read, parse or validate falls back to a
copy of the default object, so a corrupt store never takes the caller down.
"""
from __future__ import annotations
import copy
import json
from typing import Any, Callable, Dict, Optional, Protocol, TypeVar

from loguru import logger

from .streams import FOOT_TYPES, RIDE_TYPES, RUN_TYPES

T = TypeVar("T")
Validator = Callable[[Any], bool]

MAP_PREFERENCES_KEY = "map-preferences"
ROUTE_SETTINGS_KEY = "route-settings"
DASHBOARD_SUMMARY_KEY = "dashboard-summary-card"

MAP_STYLES = ("light", "dark", "satellite")
ACTIVITY_TYPES = RIDE_TYPES + RUN_TYPES + FOOT_TYPES + ("Swim", "OpenWaterSwim")
METRIC_IDS = ("hrv", "rhr", "weekHours", "weekCount", "ftp", "thresholdPace", "css", "fitness", "form")

DEFAULT_MAP_PREFERENCES: Dict[str, Any] = {"defaultStyle": "light", "activityTypeStyles": {}}
DEFAULT_ROUTE_SETTINGS: Dict[str, Any] = {"enabled": True, "retentionDays": 0, "autoCleanupEnabled": False}
DEFAULT_DASHBOARD_SUMMARY: Dict[str, Any] = {
    "heroMetric": "form",
    "showSparkline": True,
    "supportingMetrics": ["fitness", "ftp", "weekHours", "weekCount"],
}


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store, handy for tests and demo sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


def is_map_preferences(value: Any) -> bool:
    if not isinstance(value, dict) or value.get("defaultStyle") not in MAP_STYLES:
        return False
    styles = value.get("activityTypeStyles", {})
    if not isinstance(styles, dict):
        return False
    return all(k in ACTIVITY_TYPES and v in MAP_STYLES for k, v in styles.items())


def is_route_settings(value: Any) -> bool:
    """Partial objects are fine; present keys must have the right type."""
    if not isinstance(value, dict):
        return False
    checks = {"enabled": bool, "autoCleanupEnabled": bool}
    for key, kind in checks.items():
        if key in value and not isinstance(value[key], kind):
            return False
    days = value.get("retentionDays", 0)
    return isinstance(days, (int, float)) and not isinstance(days, bool)


def is_dashboard_summary(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    if value.get("heroMetric") not in METRIC_IDS or not isinstance(value.get("showSparkline"), bool):
        return False
    supporting = value.get("supportingMetrics")
    return isinstance(supporting, list) and all(m in METRIC_IDS for m in supporting)


def parse_with_schema(raw: Optional[str], validator: Validator, default: T) -> T:
    if raw is None:
        return copy.deepcopy(default)
    try:
        value = json.loads(raw)
    except ValueError as e:
        logger.warning("Stored preference is not valid JSON ({}), using defaults", e)
        return copy.deepcopy(default)
    if not validator(value):
        logger.warning("Stored preference failed validation, using defaults")
        return copy.deepcopy(default)
    return value


async def load_preference(store: KeyValueStore, key: str, validator: Validator, default: T) -> T:
    try:
        raw = await store.get(key)
    except Exception as e:
        logger.warning("Reading preference {!r} failed: {}", key, e)
        return copy.deepcopy(default)
    value = parse_with_schema(raw, validator, default)
    if isinstance(default, dict) and isinstance(value, dict):
        return {**copy.deepcopy(default), **value}
    return value


async def save_preference(store: KeyValueStore, key: str, value: Any) -> None:
    await store.set(key, json.dumps(value))


async def reset_preference(store: KeyValueStore, key: str) -> None:
    await store.remove(key)


async def load_map_preferences(store: KeyValueStore) -> Dict[str, Any]:
    return await load_preference(store, MAP_PREFERENCES_KEY, is_map_preferences, DEFAULT_MAP_PREFERENCES)


async def load_route_settings(store: KeyValueStore) -> Dict[str, Any]:
    return await load_preference(store, ROUTE_SETTINGS_KEY, is_route_settings, DEFAULT_ROUTE_SETTINGS)


async def load_dashboard_summary(store: KeyValueStore) -> Dict[str, Any]:
    return await load_preference(store, DASHBOARD_SUMMARY_KEY, is_dashboard_summary, DEFAULT_DASHBOARD_SUMMARY)


def style_for_activity(prefs: Dict[str, Any], activity_type: str) -> str:
    return prefs.get("activityTypeStyles", {}).get(activity_type, prefs.get("defaultStyle", "light"))
