"""Tests for the command line interface."""
import argparse
import json
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from loopforecast.cli import build_parser, load_forecast, main, parse_action, read_action_list


def test_parse_action():
    assert parse_action("Smash Pots=3") == ("Smash Pots", 3)
    assert parse_action("Wander") == ("Wander", 1)
    assert parse_action(" Wander = 2") == ("Wander", 2)


def test_parse_action_bad_count():
    with pytest.raises(argparse.ArgumentTypeError, match="Invalid repeat count"):
        parse_action("Wander=many")


def test_read_action_list(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps([{"name": "Wander", "loops": 1}]))
    assert read_action_list(str(path)) == [{"name": "Wander", "loops": 1}]


def test_read_action_list_rejects_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps({"name": "Wander"}))
    with pytest.raises(ValueError, match="expected a JSON list"):
        read_action_list(str(path))


def test_parser_collects_actions_in_order():
    args = build_parser().parse_args(
        ["predict", "examples.idleloops_catalog", "--action", "Wander=1", "--action", "Smash Pots=2"]
    )
    assert args.actions == ["Wander=1", "Smash Pots=2"]


def test_load_forecast():
    catalog, host = load_forecast("examples.idleloops_catalog")
    assert "Wander" in catalog
    assert host.historical_totals["Fight Monsters"] == 30


def test_load_forecast_missing_function(capsys):
    with pytest.raises(SystemExit):
        load_forecast("loopforecast.report")
    assert "define_catalog" in capsys.readouterr().out


def test_main_no_command(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 0


def test_main_actions(capsys):
    main(["actions", "examples.idleloops_catalog"])
    out = capsys.readouterr().out
    assert "Wander (instant)" in out
    assert "Fight Monsters (loop)" in out


def test_main_predict(capsys):
    main(["predict", "examples.idleloops_catalog", "--action", "Smash Pots=1", "--action", "Wander=1"])
    out = capsys.readouterr().out
    assert "IdleLoops (sample)" in out
    assert "Smash Pots x1" in out
    assert "Mana: 300" in out
    assert "SUMMARY: every entry is affordable" in out


def test_main_predict_from_list(tmp_path, capsys):
    path = tmp_path / "list.json"
    path.write_text(json.dumps([{"name": "Wander", "loops": 1}]))
    main(["predict", "examples.idleloops_catalog", "--list", str(path)])
    out = capsys.readouterr().out
    assert "Wander x1" in out
    assert "Time: 00:00:05.0" in out


def test_main_predict_exports(tmp_path, capsys):
    base = tmp_path / "forecast"
    json_path = tmp_path / "forecast.json"
    main([
        "predict", "examples.idleloops_catalog",
        "--action", "Wander",
        "--export-csv", str(base),
        "--export-json", str(json_path),
    ])
    assert os.path.exists(f"{base}_entries.csv")
    assert json.loads(json_path.read_text())["entries"][0]["action_name"] == "Wander"
