"""Chronic/acute training load (CTL/ATL) recurrence.

The load state is carried forward day by day as a left fold over the daily TSS
sequence; nothing is recomputed from scratch, so the EMA state never resets mid-year.
Values are kept unrounded internally and only rounded where they are exposed.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

from .config import FixtureConfig


@dataclass(frozen=True)
class LoadState:
    ctl: float
    atl: float

    @property
    def tsb(self) -> float:
        return self.ctl - self.atl


def step(state: LoadState, tss: float, atl_days: float = 7.0, ctl_days: float = 42.0,
         target_ctl: Optional[float] = None, drift: float = 0.0) -> LoadState:
    """Advance one day. ``tss`` must be non-negative; rest days pass 0."""
    atl = state.atl + (tss - state.atl) / atl_days
    ctl = state.ctl + (tss - state.ctl) / ctl_days
    if target_ctl is not None and drift:
        ctl += (target_ctl - ctl) * drift
    return LoadState(ctl=ctl, atl=atl)


class TrainingLoadSimulator:
    """Runs the daily recurrence with seasonal CTL drift taken from the config."""

    def __init__(self, cfg: Optional[FixtureConfig] = None):
        self.cfg = cfg or FixtureConfig()

    def initial_state(self) -> LoadState:
        return LoadState(ctl=self.cfg.initial_ctl, atl=self.cfg.initial_atl)

    def advance(self, state: LoadState, tss: float, month: Optional[int] = None) -> LoadState:
        target = self.cfg.target_ctl(month) if month is not None else None
        return step(state, tss, self.cfg.atl_days, self.cfg.ctl_days, target, self.cfg.ctl_drift)

    def iter_states(self, daily_tss: Iterable[float], months: Optional[Iterable[int]] = None,
                    state: Optional[LoadState] = None) -> Iterator[LoadState]:
        """Yield the state after each day, oldest day first."""
        state = state or self.initial_state()
        months_it = iter(months) if months is not None else None
        for tss in daily_tss:
            month = next(months_it) if months_it is not None else None
            state = self.advance(state, float(tss), month)
            yield state

    def simulate(self, daily_tss: Iterable[float], months: Optional[Iterable[int]] = None) -> List[LoadState]:
        return list(self.iter_states(daily_tss, months))
