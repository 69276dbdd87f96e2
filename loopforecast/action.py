from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from loopforecast._types import DynamicFlag, Effect, Resources, Skills, Stats, resolve_flag

if TYPE_CHECKING:
    from loopforecast.progression import Progression

SegmentCost = Callable[[int], float]
SegmentProgress = Callable[[int], float]


@dataclass
class LoopEffects:
    """Effects fired when a segment, a loop or a whole repetition ends."""

    segment: Effect | None = None
    loop: Effect | None = None
    end: Effect | None = None


@dataclass
class LoopDef:
    """Segment costs, per-tick progress and effects of a loop-bearing action.

    ``cost`` and ``tick`` are factories: given the current progression (and,
    for ``tick``, the current stats, skills and resources) they return the
    per-segment function the loop engine calls.  ``max_loops`` returns the
    number of loops the action can ever finish, or ``None`` when unbounded.
    """

    cost: Callable[[Progression, ActionRule], SegmentCost]
    tick: Callable[[Progression, ActionRule, Stats, Skills, Resources], SegmentProgress]
    max_loops: Callable[[ActionRule], int | None] | None = None
    effects: LoopEffects = field(default_factory=LoopEffects)

    def max_segments(self, rule: ActionRule) -> float:
        if self.max_loops is None:
            return float("inf")
        loops = self.max_loops(rule)
        if loops is None:
            return float("inf")
        return loops * rule.segments


@dataclass
class ActionRule:
    """Static description of one repeatable action."""

    name: str
    stat_cost: dict[str, float] = field(default_factory=dict)
    mana_cost: Callable[[], float] = lambda: 1.0
    exp_multiplier: float = 1.0
    segments: int = 1
    loop_stats: list[str] = field(default_factory=list)
    can_start: DynamicFlag = True
    effect: Effect | None = None
    affected: list[str] = field(default_factory=list)
    mana_offset: Callable[[Resources], float] | None = None
    loop: LoopDef | None = None
    dungeon: int | None = None
    description: str = ""

    @property
    def has_loop(self) -> bool:
        return self.loop is not None

    def can_start_with(self, resources: Resources) -> bool:
        return resolve_flag(self.can_start, resources)

    def loop_stat(self, progression: Progression, offset: int) -> str:
        """Stat driving the segment at *offset* from the last finished loop."""
        return self.loop_stats[(progression.completed + offset) % len(self.loop_stats)]

    def finish(self, resources: Resources, skills: Skills) -> None:
        """Apply the once-per-repetition effects."""
        if self.effect is not None:
            self.effect(resources, skills)
        if self.loop is not None and self.loop.effects.end is not None:
            self.loop.effects.end(resources, skills)
