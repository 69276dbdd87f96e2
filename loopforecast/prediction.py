from __future__ import annotations

import math
from collections.abc import Mapping
from typing import TYPE_CHECKING

from loopforecast._types import Stats

if TYPE_CHECKING:
    from loopforecast.action import ActionRule
    from loopforecast.host import HostContext

# Absorbs float overshoot so an exact integer cost does not round up.
TICK_EPSILON = 1e-6


class Prediction:
    """Tick count and experience model of a single action rule."""

    def __init__(self, rule: ActionRule, host: HostContext) -> None:
        self.rule = rule
        self.host = host
        self._ticks = 0
        self._last_stats: Mapping[str, float] = {}

    @property
    def name(self) -> str:
        return self.rule.name

    def stat_cost(self, stats: Mapping[str, float]) -> float:
        """Weighted stat cost, discounted by the level of each stat."""
        cost = 0.0
        # Summed in host stat order so the float total matches the game.
        for stat in stats:
            if stat in self.rule.stat_cost:
                cost += self.rule.stat_cost[stat] / (
                    1 + self.host.level_from_exp(stats[stat]) / 100
                )
        return cost

    def update_ticks(self, stats: Mapping[str, float]) -> int:
        """Compute and cache the ticks needed for one repetition."""
        self._last_stats = stats
        self._ticks = math.ceil(
            self.rule.mana_cost() * self.stat_cost(stats) - TICK_EPSILON
        )
        return self._ticks

    def ticks(self) -> int:
        return self._ticks or self.update_ticks(self._last_stats)

    def exp(self, stats: Stats) -> None:
        """Add one tick's worth of experience to *stats*."""
        rule = self.rule
        for stat in stats:
            if stat in rule.stat_cost:
                stats[stat] += (
                    rule.stat_cost[stat]
                    * rule.exp_multiplier
                    * (rule.mana_cost() / self.ticks())
                    * self.host.bonus_multiplier(stat)
                )

    def progress_scale(self) -> float:
        """Share of the action's mana cost paid by one tick."""
        return self.rule.mana_cost() / self.ticks()
