from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Union

from loopforecast.action import ActionRule
from loopforecast.catalog import ActionCatalog
from loopforecast.engine import LoopEngine
from loopforecast.host import HostContext
from loopforecast.prediction import Prediction
from loopforecast.report import EntryReport, ForecastReport, build_entry_report
from loopforecast.snapshot import Snapshot
from loopforecast.state import SimulationState

logger = logging.getLogger(__name__)

ActionEntry = Union[tuple[str, int], Mapping[str, Any]]


def normalize_entry(entry: ActionEntry) -> tuple[str, int]:
    """Accept ``(name, count)`` pairs or the host's ``{"name", "loops"}`` shape."""
    if isinstance(entry, Mapping):
        return str(entry["name"]), int(entry.get("loops", 1))
    name, count = entry
    return str(name), int(count)


class Simulation:
    """Runs an ordered action list against a fresh simulation state."""

    def __init__(
        self,
        catalog: ActionCatalog,
        host: HostContext,
        cancel: Callable[[], bool] | None = None,
    ) -> None:
        self.catalog = catalog
        self.host = host
        self.cancel = cancel
        self.config = catalog.config

    def run(self, actions: Iterable[ActionEntry]) -> ForecastReport:
        entries = [normalize_entry(a) for a in actions]

        state = SimulationState(self.config, self.host)
        affected = self._affected(entries)
        state.init_resources(affected)
        engine = LoopEngine()
        predictions: dict[str, Prediction] = {}
        snapshots = {
            "stats": Snapshot(state.stats),
            "skills": Snapshot(state.skills),
        }

        report = ForecastReport()
        total_time = 0.0

        for name, loops in entries:
            rule = self.catalog.get(name)
            if rule is None:
                logger.debug("Skipping unknown action %r", name)
                continue

            prediction = predictions.get(name)
            if prediction is None:
                prediction = predictions[name] = Prediction(rule, self.host)
            if rule.has_loop:
                state.progression_for(rule, self.host)

            is_valid = True
            repetitions = 0
            entry_mana = 0.0
            entry_time = 0.0

            for _ in range(loops):
                if self.cancel is not None and self.cancel():
                    report.cancelled = True
                    break
                if not rule.can_start_with(state.resources):
                    logger.debug(
                        "%s cannot start after %d of %d repetitions",
                        name, repetitions, loops,
                    )
                    break

                current_mana = state.mana()
                self._predict(prediction, state, engine)

                # Sticky for the entry; the forecast keeps going on a deficit.
                is_valid = is_valid and state.mana() >= 0

                spent = self._mana_spent(rule, state, current_mana)
                report.total_mana_spent += spent
                entry_mana += spent

                elapsed = self._time_spent(current_mana - state.mana(), state)
                total_time += elapsed
                entry_time += elapsed

                rule.finish(state.resources, state.skills)
                repetitions += 1

            for key, snapshot in snapshots.items():
                snapshot.snap(getattr(state, key))

            report.entries.append(
                self._entry_report(
                    rule, affected, state, snapshots, is_valid,
                    repetitions, entry_mana, entry_time,
                )
            )

            if report.cancelled:
                logger.debug("Forecast cancelled at %r", name)
                break

        report.total_real_time = total_time / self.config.tick_rate
        logger.debug(
            "Forecast of %d entries: %s mana, %.1fs",
            len(report.entries), report.total_mana_spent, report.total_real_time,
        )
        return report

    # ── Per-repetition steps ─────────────────────────────────────────

    def _predict(
        self, prediction: Prediction, state: SimulationState, engine: LoopEngine
    ) -> None:
        """Run every tick of one repetition."""
        # Fixed for the whole repetition even though stats move while ticking
        prediction.update_ticks(state.stats)

        ticks = prediction.ticks()
        for tick in range(ticks):
            state.resources["mana"] -= 1
            prediction.exp(state.stats)
            if not engine.tick(prediction, state):
                logger.debug(
                    "%s stopped after %d of %d ticks", prediction.name, tick + 1, ticks
                )
                break

    def _mana_spent(
        self, rule: ActionRule, state: SimulationState, current_mana: float
    ) -> float:
        """Mana spent by the repetition, without the action's continuous cost."""
        if rule.mana_offset is None:
            return current_mana - state.resources["mana"]

        offset = rule.mana_offset(state.resources)
        state.resources["mana"] -= offset
        spent = current_mana - state.resources["mana"]
        state.resources["mana"] += offset
        return spent

    def _time_spent(self, mana: float, state: SimulationState) -> float:
        """Convert mana into time units, applying the time skill and buff."""
        config = self.config
        time = mana / (1 + self.host.skill_level(config.time_skill) / 60) ** 0.25

        buff = self.host.buff_level(config.time_buff)
        town = state.town()
        for band in config.time_bands:
            if band.applies(town, buff):
                time /= band.factor(buff)
                break
        return time

    def _affected(self, entries: list[tuple[str, int]]) -> list[str]:
        """Resources touched by the listed actions, in first-seen order."""
        names: dict[str, None] = {}
        for name, _ in entries:
            rule = self.catalog.get(name)
            if rule is not None:
                for resource in rule.affected:
                    names.setdefault(resource, None)
        return list(names)

    def _entry_report(
        self,
        rule: ActionRule,
        affected: list[str],
        state: SimulationState,
        snapshots: dict[str, Snapshot],
        is_valid: bool,
        repetitions: int,
        mana_spent: float,
        time: float,
    ) -> EntryReport:
        return build_entry_report(
            action_name=rule.name,
            affected=affected,
            resources=state.resources,
            is_valid=is_valid,
            stats=snapshots["stats"].changed(),
            skills=snapshots["skills"].changed(),
            level_from_exp=self.host.level_from_exp,
            skill_level_from_exp=self.host.skill_level_from_exp,
            repetitions=repetitions,
            mana_spent=mana_spent,
            time=time / self.config.tick_rate,
        )


def simulate(
    actions: Iterable[ActionEntry],
    catalog: ActionCatalog,
    host: HostContext,
    *,
    cancel: Callable[[], bool] | None = None,
) -> ForecastReport:
    """Forecast *actions* against *catalog* with the host's current totals."""
    return Simulation(catalog, host, cancel=cancel).run(actions)
