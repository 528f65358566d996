from __future__ import annotations
import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import FixtureConfig
from .curves import HR_ZONE_BPM, POWER_ZONE_WATTS
from .routes import RouteAssigner, RouteTemplate, fallback_loop
from .seeded import RandomStream, SUNDAY, activity_id, is_rest_day, time_of_day
from .skyline import BASIS_HR, BASIS_POWER, encode_skyline
from .streams import RIDE_TYPES, RUN_TYPES, stream_types_for
from .templates import ACTIVITY_TEMPLATES, ActivityTemplate, select_short_template, select_template
from .utils import format_date_id, format_local_iso, round_half_up, round_to, safe_div, sweep_dates
from .zones import estimate, estimate_zone_seconds, to_api_zone_times

FALLBACK_ROUTE_ID = "route-fallback-loop"


@dataclass
class PlannedActivity:
    record: Dict[str, Any]
    template: ActivityTemplate
    route: Optional[RouteTemplate]


@dataclass
class DayPlan:
    date: dt.date
    rest: bool
    activities: List[PlannedActivity] = field(default_factory=list)

    @property
    def date_str(self) -> str:
        return format_date_id(self.date)

    @property
    def tss(self) -> float:
        return float(sum(a.record["icu_training_load"] or 0 for a in self.activities))


def activity_name(kind: str, hour: int, is_long: bool, is_hard: bool, route_id: Optional[str] = None) -> str:
    part = "Morning" if hour < 12 else "Afternoon" if hour < 17 else "Evening"
    route_id = route_id or ""
    if kind == "Ride":
        return f"{part} Endurance Ride" if is_long else f"{part} Interval Ride" if is_hard else f"{part} Ride"
    if kind == "Run":
        return f"{part} Long Run" if is_long else f"{part} Tempo Run" if is_hard else f"{part} Run"
    if kind == "VirtualRide":
        for key, label in (("grindelwald", "Swiss Alps"), ("lavaux", "Vineyards"),
                           ("vuelta", "Stage Climb"), ("rio", "Coastal")):
            if key in route_id:
                return f"{part} Virtual Ride - {label}"
        return f"{part} Virtual Ride"
    if kind == "Swim":
        return f"{part} Open Water Swim" if route_id else f"{part} Pool Swim"
    if kind == "Hike":
        return f"{part} Mountain Hike" if is_long else f"{part} Valley Hike"
    if kind == "Walk":
        return f"{part} Walk"
    return f"{part} {kind}"


def fallback_route(cfg: FixtureConfig) -> RouteTemplate:
    return RouteTemplate(
        id=FALLBACK_ROUTE_ID,
        name="Fallback Loop",
        type="Ride",
        coordinates=tuple(fallback_loop(tuple(cfg.fallback_center), cfg.fallback_radius_deg, cfg.fallback_points)),
        distance=0.0,
        elevation=0.0,
    )


def resolve_route(template: ActivityTemplate, assigner: RouteAssigner, date_str: str,
                  cfg: FixtureConfig) -> Optional[RouteTemplate]:
    """Template route if known, else an assigned one, else the fallback loop. GPS-less -> None."""
    if not template.gps:
        return None
    route = assigner.get(template.route_id)
    if route is None:
        route = assigner.assign(template.type, template.base_distance, date_seed=date_str)
    return route or fallback_route(cfg)


def build_record(template: ActivityTemplate, route: Optional[RouteTemplate], start: dt.datetime,
                 act_id: str, season_mult: float, rs: RandomStream, cfg: FixtureConfig) -> Dict[str, Any]:
    """One API-shaped activity. Training load fields ``icu_ctl``/``icu_atl`` are filled later."""
    variance = (0.85 + rs.next() * 0.3) * season_mult
    tss = round_half_up(template.base_tss * variance)
    distance = round_half_up(template.base_distance * variance)
    moving_time = round_half_up(template.base_duration * variance)
    hr_factor = 0.95 + rs.next() * 0.1
    is_ride = template.type in RIDE_TYPES
    if is_ride:
        cadence = round_to(85 + rs.next() * 15, 1)
    elif template.type in RUN_TYPES:
        cadence = round_to(165 + rs.next() * 15, 1)
    else:
        cadence = None
    temp = round_to(18 + rs.next() * 10, 1)

    avg_speed = safe_div(distance, moving_time)
    avg_watts = round_half_up(template.base_watts * hr_factor) if template.base_watts else None
    route_ref = route.id if route is not None and route.id != FALLBACK_ROUTE_ID else None
    locality, country = route.location if route is not None else (None, None)

    zone_times = None
    if is_ride and avg_watts:
        power = estimate(moving_time, len(cfg.power_zone_weights), cfg.power_zone_weights)
        zone_times = to_api_zone_times(power)
        skyline = encode_skyline(power, BASIS_POWER, act_id + "-skyline", cfg.power_zone_intensity,
                                 cfg.skyline_min_zone_secs, cfg.skyline_block_secs, cfg.skyline_max_blocks,
                                 cfg.skyline_jitter)
    hr_secs = estimate_zone_seconds(moving_time, len(cfg.hr_zone_weights), cfg.hr_zone_weights)
    if zone_times is None:
        skyline = encode_skyline(hr_secs, BASIS_HR, act_id + "-skyline", cfg.hr_zone_intensity,
                                 cfg.skyline_min_zone_secs, cfg.skyline_block_secs, cfg.skyline_max_blocks,
                                 cfg.skyline_jitter)

    return {
        "id": act_id,
        "start_date_local": format_local_iso(start),
        "type": template.type,
        "name": activity_name(template.type, start.hour, template.is_long, template.is_hard, route_ref),
        "description": None,
        "distance": distance,
        "moving_time": moving_time,
        "elapsed_time": round_half_up(template.base_duration * variance * 1.05),
        "total_elevation_gain": round_half_up(template.base_elevation * variance),
        "total_elevation_loss": round_half_up(template.base_elevation * variance * 0.95),
        "average_speed": round_to(avg_speed, 3),
        "max_speed": round_to(avg_speed * 1.3, 3),
        "average_heartrate": round_half_up(template.base_hr * hr_factor),
        "max_heartrate": round_half_up(template.base_hr * 1.2),
        "average_cadence": cadence,
        "average_watts": avg_watts,
        "average_temp": temp,
        "calories": round_half_up(tss * 8),
        "device_name": "Demo Device",
        "trainer": template.type == "VirtualRide",
        "commute": False,
        "icu_training_load": tss,
        "icu_intensity": round_half_up(avg_watts / cfg.ftp * 100) if avg_watts else None,
        "icu_ftp": cfg.ftp,
        "icu_atl": None,
        "icu_ctl": None,
        "icu_hr_zones": list(HR_ZONE_BPM),
        "icu_power_zones": list(POWER_ZONE_WATTS),
        "icu_zone_times": zone_times,
        "icu_hr_zone_times": hr_secs,
        "skyline_chart_bytes": skyline,
        "stream_types": stream_types_for(template.type, route is not None, distance),
        "locality": locality,
        "country": country,
    }


def plan_days(reference_date: dt.date, cfg: FixtureConfig, assigner: RouteAssigner,
              pool: Sequence[ActivityTemplate] = ACTIVITY_TEMPLATES) -> List[DayPlan]:
    """Walk the calendar oldest day first and lay out each day's activities."""
    days: List[DayPlan] = []
    last_route: Optional[str] = None
    for day in sweep_dates(reference_date, cfg.n_days):
        date_str = format_date_id(day)
        weekday = day.weekday()
        if is_rest_day(date_str, weekday, cfg.monday_rest_prob, cfg.thursday_rest_prob):
            days.append(DayPlan(day, rest=True))
            continue

        plan = DayPlan(day, rest=False)
        season_mult = cfg.volume_mult(day.month)
        rs = RandomStream(date_str + "-activity")
        hours, minutes = time_of_day(date_str)
        template = select_template(date_str, weekday, pool, last_route, rs)
        route = resolve_route(template, assigner, date_str, cfg)
        start = dt.datetime.combine(day, dt.time(hours, minutes))
        record = build_record(template, route, start, activity_id(date_str, 0), season_mult, rs, cfg)
        plan.activities.append(PlannedActivity(record, template, route))
        last_route = template.route_id

        if weekday != SUNDAY and cfg.double_session_prob > 0:
            extra = RandomStream(date_str + "-double")
            if extra.next() < cfg.double_session_prob:
                second = select_short_template(pool, extra, last_route)
                route2 = resolve_route(second, assigner, date_str + "-pm", cfg)
                start2 = dt.datetime.combine(day, dt.time(17 + int(extra.next() * 3), int(extra.next() * 60)))
                record2 = build_record(second, route2, start2, activity_id(date_str, 1), season_mult, extra, cfg)
                plan.activities.append(PlannedActivity(record2, second, route2))
                last_route = second.route_id
        days.append(plan)
    return days
