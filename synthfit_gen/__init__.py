"""SynthFit deterministic demo fixture generator.

Produces, from a single reference date:
- activities: one year of API-shaped activity records (zones, skyline payloads, load)
- wellness: one record per day with CTL/ATL from the same load fold
- streams / intervals / maps: computed per activity on request

Same reference date, same dataset, on every machine. Persisted UI preferences
(map style, route matching, dashboard summary) load through ``preferences``.
"""

__all__ = [
    "FixtureConfig", "FixtureRepository", "initialize", "generate_fixtures",
    "KeyValueStore", "MemoryKeyValueStore", "load_preference", "save_preference",
    "load_map_preferences", "load_route_settings", "load_dashboard_summary",
]
from .config import FixtureConfig
from .repository import FixtureRepository, initialize
from .pipeline import generate_fixtures
from .preferences import (KeyValueStore, MemoryKeyValueStore, load_dashboard_summary, load_map_preferences,
                          load_preference, load_route_settings, save_preference)
