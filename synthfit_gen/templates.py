from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .seeded import RandomStream, SUNDAY, SATURDAY, TUESDAY, FRIDAY


@dataclass(frozen=True)
class ActivityTemplate:
    type: str
    base_distance: float   # m
    base_duration: float   # s (moving)
    base_elevation: float  # m gained
    base_speed: float      # km/h, nominal
    base_hr: int
    base_watts: int        # 0 when no power meter
    base_tss: float
    route_id: Optional[str]
    is_long: bool = False
    is_hard: bool = False
    gps: bool = True       # False for indoor sessions with no position data


def _t(type_, dist, time, elev, speed, hr, watts, tss, route, is_long=False, is_hard=False, gps=True):
    return ActivityTemplate(type_, dist, time, elev, speed, hr, watts, tss, route, is_long, is_hard, gps)


# Valais rides, ROUVY virtual rides, Rio runs, Tenerife swims, Lauterbrunnen hikes, Cape Town walks
ACTIVITY_TEMPLATES: tuple[ActivityTemplate, ...] = (
    _t("Ride", 30000, 4500, 150, 24, 145, 180, 65, "route-valais-ride-2"),
    _t("Ride", 75000, 10800, 200, 25, 135, 165, 120, "route-valais-ride-1", is_long=True),
    _t("VirtualRide", 23000, 3600, 270, 23, 150, 195, 55, "route-rouvy-grindelwald"),
    _t("VirtualRide", 17000, 2700, 280, 22, 155, 210, 50, "route-rouvy-lavaux", is_hard=True),
    _t("VirtualRide", 21000, 3300, 370, 23, 148, 190, 60, "route-rouvy-vuelta"),
    _t("Run", 3000, 1200, 20, 9, 140, 0, 25, "route-rio-run-1"),
    _t("Run", 15000, 4800, 50, 11.2, 145, 0, 70, "route-rio-run-2", is_long=True),
    _t("Run", 3000, 1100, 15, 9.8, 155, 0, 30, "route-rio-run-3", is_hard=True),
    _t("Swim", 2500, 3000, 0, 3, 130, 0, 40, None, gps=False),
    _t("Swim", 500, 1200, 0, 1.5, 135, 0, 25, "route-la-orotava-swim-1"),
    _t("Swim", 400, 900, 0, 1.6, 140, 0, 20, "route-la-orotava-swim-3", is_hard=True),
    _t("Hike", 10000, 14400, 1000, 2.5, 115, 0, 80, "route-lauterbrunnen-hike-3", is_long=True),
    _t("Hike", 1200, 2400, 60, 1.8, 105, 0, 20, "route-lauterbrunnen-hike-2"),
    _t("Walk", 3000, 2400, 700, 4.5, 95, 0, 15, "route-cape-town-walk-3"),
    _t("Walk", 2300, 1800, 140, 4.6, 90, 0, 12, "route-cape-town-walk-5"),
)

Predicate = Callable[[ActivityTemplate], bool]


def _of_type(*types: str, long: Optional[bool] = None) -> Predicate:
    def pred(t: ActivityTemplate) -> bool:
        return t.type in types and (long is None or t.is_long == long)
    return pred


# weekday -> [(cumulative threshold, group)]; the last group takes the remainder
_WEEKDAY_GROUPS: dict[int, list[tuple[float, Predicate]]] = {
    SUNDAY: [
        (0.4, _of_type("Ride", long=True)),
        (0.7, _of_type("Run", long=True)),
        (1.0, _of_type("Hike", long=True)),
    ],
    SATURDAY: [
        (0.35, _of_type("Ride")),
        (0.6, _of_type("Run")),
        (0.8, _of_type("Hike")),
        (1.0, _of_type("Walk")),
    ],
    TUESDAY: [
        (0.35, _of_type("Run")),
        (0.55, _of_type("Swim")),
        (1.0, _of_type("VirtualRide")),
    ],
}
_WEEKDAY_GROUPS[FRIDAY] = _WEEKDAY_GROUPS[TUESDAY]


def candidate_indices(weekday: int, pool: Sequence[ActivityTemplate], rs: RandomStream) -> List[int]:
    """Day-of-week candidate set. Consumes one draw on weekdays that have groups."""
    everything = list(range(len(pool)))
    groups = _WEEKDAY_GROUPS.get(weekday)
    if not groups:
        return everything
    r = rs.next()
    pred = groups[-1][1]
    for threshold, group in groups:
        if r < threshold:
            pred = group
            break
    picked = [i for i, t in enumerate(pool) if pred(t)]
    return picked or everything


def pick_avoiding_route(indices: Sequence[int], pool: Sequence[ActivityTemplate], rs: RandomStream,
                        last_route_id: Optional[str]) -> ActivityTemplate:
    """Uniform pick from ``indices``, skipping templates on yesterday's route when possible."""
    filtered = [i for i in indices if pool[i].route_id != last_route_id]
    choices = filtered or list(indices)
    return pool[choices[rs.index(len(choices))]]


def select_template(date_str: str, weekday: int, pool: Sequence[ActivityTemplate] = ACTIVITY_TEMPLATES,
                    last_route_id: Optional[str] = None, rs: Optional[RandomStream] = None) -> ActivityTemplate:
    """Choose the day's archetype. ``rs`` defaults to the ``<date>-activity`` stream."""
    if not pool:
        raise ValueError("template pool is empty")
    rs = rs or RandomStream(date_str + "-activity")
    indices = candidate_indices(weekday, pool, rs)
    return pick_avoiding_route(indices, pool, rs, last_route_id)


def select_short_template(pool: Sequence[ActivityTemplate], rs: RandomStream,
                          last_route_id: Optional[str]) -> ActivityTemplate:
    """Second-session pick: any non-long archetype."""
    indices = [i for i, t in enumerate(pool) if not t.is_long] or list(range(len(pool)))
    return pick_avoiding_route(indices, pool, rs, last_route_id)
