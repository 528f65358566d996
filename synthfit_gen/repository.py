"""In-memory fixture repository: one deterministic year of activities and wellness."""
from __future__ import annotations
import copy
import datetime as dt
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from .activities import PlannedActivity, plan_days
from .config import FixtureConfig
from .curves import athlete, pace_curve, power_curve, sport_settings
from .daily import generate_wellness, run_load_fold
from .intervals import build_intervals
from .routes import LatLng, RouteAssigner, RouteTemplate, default_routes, jitter, route_bounds
from .seeded import RandomStream
from .streams import StreamSynthesizer
from .utils import DateLike, to_date


def _day_key(value: Optional[DateLike]) -> Optional[str]:
    return None if value is None else to_date(value).isoformat()


def _in_range(day: str, oldest: Optional[str], newest: Optional[str]) -> bool:
    return (oldest is None or day >= oldest) and (newest is None or day <= newest)


class FixtureRepository:
    """Read-only queries over a dataset generated once for ``reference_date``.

    Every query hands back copies, so callers can never mutate the generated set.
    Streams and intervals are computed on each request from the activity's own seed.
    """

    def __init__(self, reference_date: Optional[DateLike] = None, cfg: Optional[FixtureConfig] = None,
                 routes: Optional[Sequence[RouteTemplate]] = None):
        self.cfg = cfg or FixtureConfig()
        self.reference_date: dt.date = to_date(reference_date)
        self.assigner = RouteAssigner(routes if routes is not None else default_routes(self.cfg.route_points),
                                      self.cfg.route_ratio_min, self.cfg.route_ratio_max)
        self._synth = StreamSynthesizer(self.cfg)

        days = plan_days(self.reference_date, self.cfg, self.assigner)
        states = run_load_fold(days, self.cfg)
        self._wellness: List[Dict[str, Any]] = generate_wellness(days, states, self.cfg)
        self._planned: Dict[str, PlannedActivity] = {}
        for day in days:
            for act in day.activities:
                self._planned[act.record["id"]] = act
        # newest first
        self._order = [a.record["id"] for day in reversed(days) for a in reversed(day.activities)]
        logger.info("Built fixtures for {}: {} activities, {} wellness days",
                    self.reference_date, len(self._planned), len(self._wellness))

    def __len__(self) -> int:
        return len(self._planned)

    # --- activities ---
    def get_activity(self, activity_id: str) -> Optional[Dict[str, Any]]:
        act = self._planned.get(activity_id)
        return copy.deepcopy(act.record) if act else None

    def get_activities(self, oldest: Optional[DateLike] = None,
                       newest: Optional[DateLike] = None) -> List[Dict[str, Any]]:
        """Activities whose start date falls in ``[oldest, newest]``, newest first."""
        lo, hi = _day_key(oldest), _day_key(newest)
        out = []
        for aid in self._order:
            rec = self._planned[aid].record
            if _in_range(rec["start_date_local"][:10], lo, hi):
                out.append(copy.deepcopy(rec))
        return out

    def get_oldest_activity_date(self) -> Optional[str]:
        return self._planned[self._order[-1]].record["start_date_local"][:10] if self._order else None

    def _coords(self, act: PlannedActivity) -> Optional[List[LatLng]]:
        if act.route is None:
            return None
        aid = act.record["id"]
        return jitter(act.route.coordinates, RandomStream(aid + "-route"), self.cfg.route_jitter_deg)

    def get_activity_streams(self, activity_id: str) -> Optional[Dict[str, list]]:
        act = self._planned.get(activity_id)
        if act is None:
            return None
        return self._synth.synthesize(copy.deepcopy(act.record), self._coords(act), activity_id + "-streams")

    def get_activity_intervals(self, activity_id: str) -> Optional[Dict[str, Any]]:
        act = self._planned.get(activity_id)
        if act is None:
            return None
        streams = self.get_activity_streams(activity_id)
        return build_intervals(act.record, streams, activity_id + "-intervals", is_hard=act.template.is_hard,
                               ftp=self.cfg.ftp, lthr=self.cfg.lthr)

    def get_activity_map(self, activity_id: str, bounds_only: bool = False) -> Optional[Dict[str, Any]]:
        act = self._planned.get(activity_id)
        if act is None:
            return None
        coords = self._coords(act)
        if not coords:
            return None
        return {
            "bounds": route_bounds(coords),
            "latlngs": None if bounds_only else [[lat, lng] for lat, lng in coords],
            "route": None,
            "weather": None,
        }

    # --- wellness ---
    def get_wellness(self, oldest: Optional[DateLike] = None,
                     newest: Optional[DateLike] = None) -> List[Dict[str, Any]]:
        """Wellness rows in ``[oldest, newest]``, oldest first."""
        lo, hi = _day_key(oldest), _day_key(newest)
        return [copy.deepcopy(w) for w in self._wellness if _in_range(w["id"], lo, hi)]

    # --- static fixtures ---
    def get_athlete(self) -> Dict[str, Any]:
        return athlete(self.cfg)

    def get_sport_settings(self) -> List[Dict[str, Any]]:
        return sport_settings(self.cfg)

    def get_power_curve(self) -> Dict[str, Any]:
        return power_curve()

    def get_pace_curve(self, days: int = 42) -> Dict[str, Any]:
        return pace_curve(self.reference_date, days)


def initialize(reference_date: Optional[DateLike] = None, cfg: Optional[FixtureConfig] = None) -> FixtureRepository:
    """Generate the dataset for ``reference_date`` (today when omitted)."""
    return FixtureRepository(reference_date, cfg)
