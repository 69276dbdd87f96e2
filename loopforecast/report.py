from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable

from loopforecast.snapshot import Comparison


@dataclass(frozen=True)
class LevelChange:
    """Level reached after an entry and the levels gained during it."""

    level: float
    gained: float


@dataclass
class EntryReport:
    """Forecast outcome of one entry of the action list."""

    action_name: str
    resources: dict[str, float] = field(default_factory=dict)
    is_valid: bool = True
    stat_levels: dict[str, LevelChange] = field(default_factory=dict)
    skill_levels: dict[str, LevelChange] = field(default_factory=dict)
    repetitions: int = 0
    mana_spent: float = 0.0
    time: float = 0.0

    def visible_resources(self) -> dict[str, float]:
        """Affected resources with a non-zero value."""
        return {k: v for k, v in self.resources.items() if v != 0}


@dataclass
class ForecastReport:
    """Container for a forecast's per-entry reports and totals."""

    entries: list[EntryReport] = field(default_factory=list)
    total_mana_spent: float = 0.0
    total_real_time: float = 0.0
    cancelled: bool = False

    @property
    def is_valid(self) -> bool:
        return all(e.is_valid for e in self.entries)

    def entry(self, action_name: str) -> EntryReport | None:
        """First report for *action_name*, if the list contains it."""
        for e in self.entries:
            if e.action_name == action_name:
                return e
        return None

    def total_time_parts(self) -> tuple[int, int, int, int]:
        """Split the magnitude of the real time into (hours, minutes, seconds, tenths)."""
        t = abs(self.total_real_time)
        hours = math.floor(t / 3600)
        minutes = math.floor(t % 3600 / 60)
        seconds = math.floor(t % 3600 % 60)
        tenths = math.floor(t % 1 * 10)
        return hours, minutes, seconds, tenths


def level_changes(
    comparisons: Mapping[str, Comparison],
    level_from_exp: Callable[[float], float],
) -> dict[str, LevelChange]:
    """Level deltas for every value that moved since the last snapshot."""
    changes: dict[str, LevelChange] = {}
    for name, c in comparisons.items():
        if not c.delta:
            continue
        start = level_from_exp(c.previous)
        end = level_from_exp(c.value)
        changes[name] = LevelChange(level=end, gained=end - start)
    return changes


def build_entry_report(
    action_name: str,
    affected: list[str],
    resources: Mapping[str, float],
    is_valid: bool,
    stats: Mapping[str, Comparison],
    skills: Mapping[str, Comparison],
    level_from_exp: Callable[[float], float],
    skill_level_from_exp: Callable[[float], float],
    repetitions: int = 0,
    mana_spent: float = 0.0,
    time: float = 0.0,
) -> EntryReport:
    """Build an EntryReport from the state after an entry has run."""
    return EntryReport(
        action_name=action_name,
        resources={name: resources.get(name, 0) for name in affected},
        is_valid=is_valid,
        stat_levels=level_changes(stats, level_from_exp),
        skill_levels=level_changes(skills, skill_level_from_exp),
        repetitions=repetitions,
        mana_spent=mana_spent,
        time=time,
    )
