from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from loopforecast.action import ActionRule


class MissingCatalogEntryError(ValueError):
    """A behaviour was declared for an action the host does not know."""


@dataclass(frozen=True)
class TimeBuffBand:
    """Time reduction granted by a buff while the run is in *town*.

    Applies once the buff level exceeds ``floor``; time is divided by
    ``1 + min(level - floor, width) / divisor``.
    """

    town: int
    floor: float
    width: float
    divisor: float

    def applies(self, town: int, level: float) -> bool:
        return town == self.town and level > self.floor

    def factor(self, level: float) -> float:
        return 1 + min(level - self.floor, self.width) / self.divisor


DEFAULT_TIME_BANDS: tuple[TimeBuffBand, ...] = (
    TimeBuffBand(town=0, floor=0, width=20, divisor=10),
    TimeBuffBand(town=1, floor=20, width=20, divisor=20),
    TimeBuffBand(town=2, floor=40, width=20, divisor=40),
)


@dataclass
class ForecastConfig:
    """Top-level forecast configuration."""

    name: str = "Untitled"
    starting_mana: float = 250
    starting_town: int = 0
    tick_rate: int = 50
    time_skill: str = "Chronomancy"
    time_buff: str = "Ritual"
    time_bands: tuple[TimeBuffBand, ...] = DEFAULT_TIME_BANDS


@dataclass
class ActionCatalog:
    """Every action rule the forecaster can evaluate, keyed by name."""

    config: ForecastConfig = field(default_factory=ForecastConfig)
    rules: list[ActionRule] = field(default_factory=list)

    _rules_by_name: dict[str, ActionRule] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        errors = self.validate()
        if errors:
            raise ValueError(
                "Invalid ActionCatalog:\n" + "\n".join(f"  - {e}" for e in errors)
            )
        self._rules_by_name = {r.name: r for r in self.rules}

    def get(self, name: str) -> ActionRule | None:
        return self._rules_by_name.get(name)

    def names(self) -> list[str]:
        return [r.name for r in self.rules]

    def __contains__(self, name: object) -> bool:
        return name in self._rules_by_name

    def __len__(self) -> int:
        return len(self.rules)

    def validate(self) -> list[str]:
        """Check for common rule errors. Returns list of error messages."""
        errors: list[str] = []

        seen: set[str] = set()
        for r in self.rules:
            if r.name in seen:
                errors.append(f"Duplicate action name: {r.name!r}")
            seen.add(r.name)

        for r in self.rules:
            if not callable(r.mana_cost):
                errors.append(f"Action {r.name!r} has a non-callable mana_cost")
            if r.loop is None:
                continue
            if r.segments < 1:
                errors.append(
                    f"Loop action {r.name!r} needs at least one segment, got {r.segments}"
                )
            if not r.loop_stats:
                errors.append(f"Loop action {r.name!r} has no loop_stats")

        if self.config.tick_rate <= 0:
            errors.append(f"tick_rate must be positive, got {self.config.tick_rate}")

        return errors


def build_catalog(
    behaviours: Mapping[str, Mapping[str, Any]],
    metadata: Callable[[str], Mapping[str, Any] | None],
    config: ForecastConfig | None = None,
) -> ActionCatalog:
    """Bind per-action behaviour to the host's action metadata.

    *behaviours* maps an action name to the keyword arguments that describe
    what the action does (``effect``, ``loop``, ``can_start``, ...), while
    *metadata* looks up what the host knows about it (``stat_cost``,
    ``mana_cost``, ``segments``, ...).  A name the host cannot resolve is a
    fatal error.
    """
    rules: list[ActionRule] = []
    for name, params in behaviours.items():
        meta = metadata(name)
        if meta is None:
            raise MissingCatalogEntryError(f"No host metadata for action {name!r}")
        fields = dict(meta)
        fields.update(params)
        fields["name"] = name
        rules.append(ActionRule(**fields))
    return ActionCatalog(config=config or ForecastConfig(), rules=rules)
