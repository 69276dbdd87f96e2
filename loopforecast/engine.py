from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from loopforecast.action import SegmentCost

if TYPE_CHECKING:
    from loopforecast.action import ActionRule
    from loopforecast.prediction import Prediction
    from loopforecast.progression import Progression
    from loopforecast.state import SimulationState

logger = logging.getLogger(__name__)


class SegmentCostCache:
    """Memoized segment costs of one progression.

    Segment costs are a function of the progression's counters and the rule
    only, so they are kept until ``completed`` or ``total_loops`` move.  The
    cached values are the ones the cost function returned, which keeps the
    loop engine's arithmetic identical to calling it every time.
    """

    def __init__(self, rule: ActionRule, progression: Progression) -> None:
        self.rule = rule
        self.progression = progression
        self._key: tuple[int, int] | None = None
        self._costs: dict[int, float] = {}
        self._cost: SegmentCost | None = None

    def __call__(self, segment: int) -> float:
        key = self.progression.signature()
        if key != self._key:
            self._key = key
            self._costs.clear()
            self._cost = self.rule.loop.cost(self.progression, self.rule)

        value = self._costs.get(segment)
        if value is None:
            value = self._cost(segment)
            # Negative indices are the wrap-back after a finished loop and
            # only feed the subtraction; any value is accepted there.
            if segment >= 0 and not value > 0:
                raise ValueError(
                    f"Loop action {self.rule.name!r} returned non-positive cost "
                    f"{value!r} for segment {segment}"
                )
            self._costs[segment] = value
        return value


class LoopEngine:
    """Advances loop-bearing actions one tick at a time."""

    def __init__(self) -> None:
        self._caches: dict[str, SegmentCostCache] = {}

    def _cost_for(self, rule: ActionRule, progression: Progression) -> SegmentCostCache:
        cache = self._caches.get(rule.name)
        if cache is None or cache.progression is not progression:
            cache = SegmentCostCache(rule, progression)
            self._caches[rule.name] = cache
        return cache

    def tick(self, prediction: Prediction, state: SimulationState) -> bool:
        """Apply one tick of progress. Returns whether ticking may continue."""
        rule = prediction.rule
        loop = rule.loop
        if loop is None:
            return True

        progression = state.progress[rule.name]
        loop_cost = self._cost_for(rule, progression)
        tick_progress = loop.tick(
            progression, rule, state.stats, state.skills, state.resources
        )
        total_segments = rule.segments
        max_segments = loop.max_segments(rule)

        # Current segment, re-derived from the progress into this loop
        segment = 0
        progress = progression.progress_units
        while progress >= loop_cost(segment):
            progress -= loop_cost(segment)
            segment += 1

        additional = tick_progress(segment) * prediction.progress_scale()
        progress += additional
        progression.progress_units += additional

        while progress >= loop_cost(segment) and segment < max_segments:
            if segment >= total_segments - 1:
                progression.progress_units = 0
                progression.completed += total_segments
                progression.total_loops += 1
                segment -= total_segments
                logger.debug(
                    "%s finished loop %d", rule.name, progression.total_loops
                )
                if loop.effects.loop is not None:
                    loop.effects.loop(state.resources, state.skills)

            if loop.effects.segment is not None:
                loop.effects.segment(state.resources, state.skills)

            progress -= loop_cost(segment)
            segment += 1

        return additional > 0 and segment < max_segments
