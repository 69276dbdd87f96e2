"""Read-only collaborators supplied by the host game."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from loopforecast.action import ActionRule


class HostContextError(ValueError):
    """The host context is missing a member the forecaster needs."""


class MissingExperienceCurveError(HostContextError):
    """An experience-to-level curve was not supplied."""


@dataclass(frozen=True)
class DungeonFloor:
    """One floor of a dungeon as the host reports it."""

    completed: int = 0


@dataclass
class HostContext:
    """Everything the forecaster reads from the running game.

    Construction fails fast when a curve or table is missing, instead of
    discovering the gap halfway through a forecast.
    """

    stat_names: list[str]
    skills: dict[str, float]
    level_from_exp: Callable[[float], float]
    skill_level_from_exp: Callable[[float], float]
    bonus_multiplier: Callable[[str], float]
    historical_totals: dict[str, int] = field(default_factory=dict)
    dungeons: list[list[DungeonFloor]] = field(default_factory=list)
    buffs: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("level_from_exp", "skill_level_from_exp"):
            if not callable(getattr(self, name)):
                raise MissingExperienceCurveError(
                    f"HostContext.{name} must be a callable experience curve"
                )
        if not callable(self.bonus_multiplier):
            raise HostContextError("HostContext.bonus_multiplier must be callable")

        errors: list[str] = []
        if self.stat_names is None:
            errors.append("stat_names is required")
        if self.skills is None:
            errors.append("skills is required")
        for attr in ("historical_totals", "dungeons", "buffs"):
            if getattr(self, attr) is None:
                errors.append(f"{attr} must not be None")
        if errors:
            raise HostContextError(
                "Invalid HostContext:\n" + "\n".join(f"  - {e}" for e in errors)
            )

    def historical_total(self, rule: ActionRule) -> int:
        return self.historical_totals.get(rule.name, 0)

    def skill_level(self, name: str) -> float:
        """Level of a skill as the host currently has it."""
        return self.skill_level_from_exp(self.skill_totals().get(name.lower(), 0))

    def skill_totals(self) -> dict[str, float]:
        """Skill experience keyed by lower-cased skill name."""
        return {name.lower(): exp for name, exp in self.skills.items()}

    def buff_level(self, name: str) -> float:
        return self.buffs.get(name, 0)

    def dungeon(self, index: int) -> list[DungeonFloor]:
        return self.dungeons[index]
