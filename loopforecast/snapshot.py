from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass
class Comparison:
    """Latest observed value and its change since the previous observation."""

    value: float
    delta: float | None = None

    @property
    def previous(self) -> float:
        return self.value - (self.delta or 0)


class Snapshot:
    """Tracks named values from one observation to the next."""

    def __init__(self, values: Mapping[str, float] | None = None) -> None:
        self.attributes: dict[str, Comparison] = {}
        self._initialized = False
        if values is not None:
            self.init(values)

    def init(self, values: Mapping[str, float]) -> dict[str, Comparison]:
        for name, value in values.items():
            self.attributes[name] = Comparison(value=value)
        self._initialized = True
        return self.attributes

    def snap(self, values: Mapping[str, float]) -> dict[str, Comparison]:
        """Observe *values* and record the change of every tracked key."""
        if not self._initialized:
            return self.init(values)

        for name, value in values.items():
            comparison = self.attributes.get(name)
            if comparison is None:
                self.attributes[name] = Comparison(value=value)
                continue
            comparison.delta = value - comparison.value
            comparison.value = value
        return self.attributes

    def get(self) -> dict[str, Comparison]:
        return self.attributes

    def changed(self) -> dict[str, Comparison]:
        """Comparisons whose last observation moved the value."""
        return {name: c for name, c in self.attributes.items() if c.delta}
