from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from loopforecast.progression import Progression

if TYPE_CHECKING:
    from loopforecast.action import ActionRule
    from loopforecast.catalog import ForecastConfig
    from loopforecast.host import HostContext


class SimulationState:
    """Mutable container threaded through one forecast run."""

    def __init__(self, config: ForecastConfig, host: HostContext) -> None:
        # Unknown resource names read as 0 and are created on first reference.
        self.resources: defaultdict[str, float] = defaultdict(int)
        self.resources["mana"] = config.starting_mana
        self.resources["town"] = config.starting_town
        self.stats: dict[str, float] = {name: 0 for name in host.stat_names}
        self.skills: dict[str, float] = host.skill_totals()
        self.progress: dict[str, Progression] = {}

    def mana(self) -> float:
        return self.resources["mana"]

    def town(self) -> int:
        return int(self.resources["town"])

    def init_resources(self, names: list[str]) -> None:
        """Make sure each affected resource exists, without touching set ones."""
        for name in names:
            self.resources.setdefault(name, 0)

    def progression_for(self, rule: ActionRule, host: HostContext) -> Progression:
        """Return the progression of *rule*, seeding it on first use."""
        progression = self.progress.get(rule.name)
        if progression is None:
            progression = Progression(total_loops=host.historical_total(rule))
            self.progress[rule.name] = progression
        return progression
