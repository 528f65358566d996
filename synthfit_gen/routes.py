"""GPS route library and activity-to-route assignment."""
from __future__ import annotations
import json
import math
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from .seeded import RandomStream

LatLng = Tuple[float, float]
Bounds = List[List[float]]

ROUTES_PATH = Path(__file__).with_name("data") / "routes.json"

# activity type -> route types it may be drawn on
ACCEPTABLE_ROUTE_TYPES: Dict[str, Tuple[str, ...]] = {
    "VirtualRide": ("VirtualRide",),
    "Ride": ("Ride", "VirtualRide"),
    "Run": ("Run",),
    "TrailRun": ("Run",),
    "Swim": ("Swim",),
    "OpenWaterSwim": ("Swim",),
    "Hike": ("Hike", "Walk", "Run"),
    "Walk": ("Walk", "Hike"),
}


@dataclass(frozen=True)
class RouteTemplate:
    id: str
    name: str
    type: str
    coordinates: Tuple[LatLng, ...]
    distance: float
    elevation: float
    region: Optional[str] = None
    attribution: Optional[str] = None

    @property
    def location(self) -> Tuple[Optional[str], Optional[str]]:
        """(locality, country) parsed from ``"Locality, Country"``."""
        if not self.region:
            return None, None
        parts = [p.strip() for p in self.region.split(",")]
        locality = parts[0] or None
        country = parts[1] if len(parts) > 1 and parts[1] else None
        return locality, country


def densify(waypoints: Sequence[Sequence[float]], points: int) -> Tuple[LatLng, ...]:
    """Resample a waypoint polyline to ``points`` samples evenly spaced along its length."""
    wp = np.asarray(waypoints, dtype=float)
    if len(wp) < 2 or points <= len(wp):
        return tuple((round(float(a), 6), round(float(b), 6)) for a, b in wp)
    seg = np.hypot(np.diff(wp[:, 0]), np.diff(wp[:, 1]) * math.cos(math.radians(float(wp[:, 0].mean()))))
    cum = np.concatenate([[0.0], np.cumsum(seg)])
    if cum[-1] <= 0:
        return tuple((round(float(a), 6), round(float(b), 6)) for a, b in wp)
    s = np.linspace(0.0, cum[-1], points)
    lat = np.interp(s, cum, wp[:, 0])
    lng = np.interp(s, cum, wp[:, 1])
    return tuple((round(float(a), 6), round(float(b), 6)) for a, b in zip(lat, lng))


def load_routes(path: Optional[Path] = None, points: int = 200) -> Tuple[RouteTemplate, ...]:
    path = Path(path) if path else ROUTES_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    attribution = data.get("attribution")
    routes = tuple(
        RouteTemplate(
            id=r["id"],
            name=r.get("name", r["id"]),
            type=r["type"],
            coordinates=densify(r["waypoints"], points),
            distance=float(r["distance"]),
            elevation=float(r.get("elevation", 0.0)),
            region=r.get("region"),
            attribution=attribution,
        )
        for r in data["routes"]
    )
    logger.debug("Loaded {} routes from {}", len(routes), path.name)
    return routes


@lru_cache(maxsize=4)
def default_routes(points: int = 200) -> Tuple[RouteTemplate, ...]:
    return load_routes(points=points)


class RouteAssigner:
    """Maps an activity type and expected distance to a route from the library."""

    def __init__(self, routes: Iterable[RouteTemplate], ratio_min: float = 0.5, ratio_max: float = 2.0):
        self.routes = tuple(routes)
        self._by_id = {r.id: r for r in self.routes}
        self.ratio_min = ratio_min
        self.ratio_max = ratio_max

    def get(self, route_id: Optional[str]) -> Optional[RouteTemplate]:
        return self._by_id.get(route_id) if route_id else None

    def assign(self, activity_type: str, expected_distance: float,
               date_seed: Optional[str] = None) -> Optional[RouteTemplate]:
        """Pick a route of an acceptable type, preferring ones close to the expected distance.

        Returns ``None`` when no route of an acceptable type exists.
        """
        types = ACCEPTABLE_ROUTE_TYPES.get(activity_type, ())
        typed = [r for r in self.routes if r.type in types]
        if not typed:
            return None
        matches = [
            r for r in typed
            if expected_distance > 0 and self.ratio_min < r.distance / expected_distance < self.ratio_max
        ]
        if not matches:
            logger.debug("No {} route near {:.0f} m, using any acceptable route", activity_type, expected_distance)
            matches = typed
        if date_seed is None:
            return matches[0]
        return matches[RandomStream(date_seed + "-route").index(len(matches))]


def route_bounds(coords: Sequence[LatLng]) -> Bounds:
    """[[minLat, minLng], [maxLat, maxLng]]; all zeros for an empty path."""
    if not coords:
        return [[0.0, 0.0], [0.0, 0.0]]
    arr = np.asarray(coords, dtype=float)
    return [[float(arr[:, 0].min()), float(arr[:, 1].min())],
            [float(arr[:, 0].max()), float(arr[:, 1].max())]]


def fallback_loop(center: LatLng = (-33.89, 151.2), radius: float = 0.01, points: int = 50) -> List[LatLng]:
    """Closed circular path used when a route cannot be resolved."""
    coords = []
    for i in range(points):
        angle = (i / points) * math.pi * 2
        coords.append((center[0] + math.sin(angle) * radius, center[1] + math.cos(angle) * radius))
    if coords:
        coords.append(coords[0])
    return coords


def jitter(coords: Sequence[LatLng], rs: RandomStream, amount: float) -> List[LatLng]:
    """Small per-activity offset so repeat outings on a route don't overlap exactly."""
    if not coords:
        return []
    noise = rs.centered(2 * len(coords), amount).reshape(-1, 2)
    return [(lat + float(d[0]), lng + float(d[1])) for (lat, lng), d in zip(coords, noise)]
