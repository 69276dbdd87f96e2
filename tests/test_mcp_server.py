"""Tests for MCP server tool functions."""

import pytest

from loopforecast.action import ActionRule, LoopDef, LoopEffects
from loopforecast.catalog import ActionCatalog, ForecastConfig
from loopforecast.host import HostContext
from loopforecast.mcp.__main__ import main as mcp_main

from loopforecast.mcp.server import (
    _MAX_ENTRIES,
    _ForecastHolder,
    _tool_get_action_info,
    _tool_get_catalog_info,
    _tool_predict,
    _tool_predict_text,
    create_server,
)


def _make_test_catalog() -> ActionCatalog:
    """A small catalog with one instant and one loop action."""
    def gain(key):
        def effect(resources, skills):
            resources[key] += 1
        return effect

    return ActionCatalog(
        config=ForecastConfig(name="Test Forecast", starting_mana=100),
        rules=[
            ActionRule(
                "Wander",
                stat_cost={"Per": 10},
                effect=gain("pots"),
                affected=["pots"],
                description="Look around town",
            ),
            ActionRule(
                "Fight",
                stat_cost={"Str": 10},
                segments=2,
                loop_stats=["Str", "Per"],
                affected=["wins"],
                loop=LoopDef(
                    cost=lambda prog, rule: (lambda segment: 5),
                    tick=lambda prog, rule, stats, skills, resources: (lambda segment: 10),
                    max_loops=lambda rule: 3,
                    effects=LoopEffects(loop=gain("wins")),
                ),
            ),
        ],
    )


def _make_test_host() -> HostContext:
    return HostContext(
        stat_names=["Str", "Per"],
        skills={"Combat": 0, "Alchemy": 0},
        level_from_exp=lambda exp: exp / 10,
        skill_level_from_exp=lambda exp: 0,
        bonus_multiplier=lambda stat: 1.0,
        historical_totals={"Fight": 4},
    )


def _make_holder() -> _ForecastHolder:
    return _ForecastHolder(catalog=_make_test_catalog(), host=_make_test_host())


class TestGetCatalogInfo:
    def test_returns_overview(self):
        info = _tool_get_catalog_info(_make_holder())
        assert info["name"] == "Test Forecast"
        assert info["starting_mana"] == 100
        assert info["stats"] == ["Str", "Per"]
        assert info["skills"] == ["alchemy", "combat"]

    def test_lists_actions(self):
        info = _tool_get_catalog_info(_make_holder())
        actions = {a["name"]: a for a in info["actions"]}
        assert actions["Wander"]["kind"] == "instant"
        assert actions["Wander"]["affected"] == ["pots"]
        assert actions["Fight"]["kind"] == "loop"


class TestGetActionInfo:
    def test_instant_action(self):
        info = _tool_get_action_info(_make_holder(), "Wander")
        assert info["description"] == "Look around town"
        assert info["stat_cost"] == {"Per": 10}
        assert info["mana_cost"] == 1.0
        assert "segments" not in info

    def test_loop_action(self):
        info = _tool_get_action_info(_make_holder(), "Fight")
        assert info["segments"] == 2
        assert info["loop_stats"] == ["Str", "Per"]
        assert info["max_segments"] == 6
        assert info["historical_loops"] == 4

    def test_unknown_action(self):
        info = _tool_get_action_info(_make_holder(), "Dance")
        assert "error" in info


class TestPredict:
    def test_basic_forecast(self):
        result = _tool_predict(
            _make_holder(), [{"name": "Wander", "loops": 2}, {"name": "Fight"}]
        )
        assert "error" not in result
        assert result["is_valid"] is True
        assert result["total_mana_spent"] == 30
        assert [e["action_name"] for e in result["entries"]] == ["Wander", "Fight"]
        assert result["entries"][0]["resources"] == {"pots": 2}
        assert result["entries"][1]["resources"] == {"pots": 2, "wins": 1}
        assert "Per" in result["entries"][0]["stat_levels"]

    def test_out_of_mana(self):
        result = _tool_predict(_make_holder(), [{"name": "Wander", "loops": 11}])
        assert result["is_valid"] is False
        assert result["entries"][0]["is_valid"] is False

    def test_unknown_actions_reported(self):
        result = _tool_predict(
            _make_holder(), [{"name": "Dance"}, {"name": "Wander"}]
        )
        assert result["skipped_unknown"] == ["Dance"]
        assert len(result["entries"]) == 1

    def test_invalid_entry(self):
        result = _tool_predict(_make_holder(), [{"loops": 2}])
        assert "error" in result

    def test_loops_out_of_range(self):
        result = _tool_predict(_make_holder(), [{"name": "Wander", "loops": -1}])
        assert "error" in result

    def test_too_many_entries(self):
        actions = [{"name": "Wander"}] * (_MAX_ENTRIES + 1)
        result = _tool_predict(_make_holder(), actions)
        assert "error" in result

    def test_time_display(self):
        result = _tool_predict(_make_holder(), [{"name": "Wander"}])
        assert result["total_time_display"] == "00:00:00.2"


class TestPredictText:
    def test_report_text(self):
        result = _tool_predict_text(_make_holder(), [{"name": "Wander", "loops": 2}])
        assert "Test Forecast" in result["report"]
        assert "Wander x2" in result["report"]

    def test_invalid_entry(self):
        result = _tool_predict_text(_make_holder(), [{"loops": 2}])
        assert "error" in result


def test_main_requires_catalog_module(capsys):
    with pytest.raises(SystemExit) as exc:
        mcp_main([])
    assert exc.value.code == 1
    err = capsys.readouterr().err
    assert "define_catalog()" in err
    assert "define_host()" in err


def test_create_server():
    server = create_server(_make_test_catalog(), _make_test_host())
    assert server.name == "loopforecast: Test Forecast"
