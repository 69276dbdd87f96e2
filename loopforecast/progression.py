from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class Progression:
    """Running counters of a loop-bearing action.

    ``completed`` counts finished segments and only grows by whole loops,
    ``progress_units`` is the partial progress into the current loop and
    ``total_loops`` counts every loop ever finished, including those done
    before the forecast started.
    """

    completed: int = 0
    progress_units: float = 0.0
    total_loops: int = 0

    def loops_done(self, segments: int) -> int:
        """Whole loops finished during this run (the dungeon floor index)."""
        return math.floor(self.completed / segments + 1e-7)

    def signature(self) -> tuple[int, int]:
        return (self.completed, self.total_loops)
