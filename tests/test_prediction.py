"""Tests for prediction module."""
import math

import pytest

from loopforecast.action import ActionRule
from loopforecast.host import HostContext
from loopforecast.prediction import Prediction


def _make_host(level_from_exp=lambda exp: 0, bonus=lambda stat: 1.0) -> HostContext:
    return HostContext(
        stat_names=["Dex", "Str", "Con"],
        skills={"Combat": 0},
        level_from_exp=level_from_exp,
        skill_level_from_exp=lambda exp: 0,
        bonus_multiplier=bonus,
    )


def _make_stats() -> dict:
    return {"Dex": 0, "Str": 0, "Con": 0}


def test_ticks_from_stat_cost():
    rule = ActionRule("Train", stat_cost={"Str": 10})
    p = Prediction(rule, _make_host())
    assert p.update_ticks(_make_stats()) == 10
    assert p.ticks() == 10


def test_ticks_exact_integer_does_not_round_up():
    # 0.1 * 3 weights sum to 0.30000000000000004
    rule = ActionRule(
        "Split", stat_cost={"Dex": 0.1, "Str": 0.1, "Con": 0.1}, mana_cost=lambda: 10.0
    )
    p = Prediction(rule, _make_host())
    assert p.update_ticks(_make_stats()) == 3


def test_ticks_scale_with_mana_cost():
    rule = ActionRule("Long", stat_cost={"Str": 1}, mana_cost=lambda: 250.0)
    p = Prediction(rule, _make_host())
    assert p.update_ticks(_make_stats()) == 250


def test_levels_reduce_ticks():
    rule = ActionRule("Train", stat_cost={"Str": 1}, mana_cost=lambda: 100.0)
    p = Prediction(rule, _make_host(level_from_exp=lambda exp: exp))
    assert p.update_ticks({"Dex": 0, "Str": 0, "Con": 0}) == 100
    # 100 / (1 + 100 / 100) = 50
    assert p.update_ticks({"Dex": 0, "Str": 100, "Con": 0}) == 50


def test_absent_stats_do_not_change_ticks():
    rule = ActionRule("Train", stat_cost={"Str": 1}, mana_cost=lambda: 100.0)
    p = Prediction(rule, _make_host(level_from_exp=lambda exp: exp))
    assert p.update_ticks({"Dex": 500, "Str": 0, "Con": 900}) == 100


def test_ticks_non_increasing_in_levels():
    rule = ActionRule("Train", stat_cost={"Str": 3, "Con": 2}, mana_cost=lambda: 50.0)
    p = Prediction(rule, _make_host(level_from_exp=lambda exp: math.floor(exp / 10)))
    previous = None
    for exp in range(0, 2000, 37):
        ticks = p.update_ticks({"Dex": 0, "Str": exp, "Con": exp})
        if previous is not None:
            assert ticks <= previous
        previous = ticks


def test_exp_split_across_ticks():
    rule = ActionRule("Train", stat_cost={"Str": 10})
    p = Prediction(rule, _make_host())
    stats = _make_stats()
    p.update_ticks(stats)
    for _ in range(p.ticks()):
        p.exp(stats)
    assert stats["Str"] == pytest.approx(10.0)
    assert stats["Dex"] == 0
    assert stats["Con"] == 0


def test_exp_applies_multiplier_and_bonus():
    rule = ActionRule("Study", stat_cost={"Dex": 2}, exp_multiplier=4.0)
    p = Prediction(rule, _make_host(bonus=lambda stat: 1.5))
    stats = _make_stats()
    p.update_ticks(stats)
    p.exp(stats)
    # 2 * 4 * (1 / 2) * 1.5
    assert stats["Dex"] == pytest.approx(6.0)


def test_progress_scale():
    rule = ActionRule("Fight", stat_cost={"Str": 10}, mana_cost=lambda: 1.0)
    p = Prediction(rule, _make_host())
    p.update_ticks(_make_stats())
    assert p.progress_scale() == pytest.approx(0.1)


def test_name():
    p = Prediction(ActionRule("Wander"), _make_host())
    assert p.name == "Wander"
