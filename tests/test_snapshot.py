"""Tests for snapshot module."""
from loopforecast.snapshot import Comparison, Snapshot


def test_initial_delta_is_none():
    snap = Snapshot({"str": 0, "dex": 5})
    assert snap.get()["str"] == Comparison(value=0, delta=None)
    assert snap.get()["dex"].delta is None


def test_snap_records_delta():
    snap = Snapshot({"str": 0})
    result = snap.snap({"str": 12.5})
    assert result["str"].value == 12.5
    assert result["str"].delta == 12.5


def test_delta_is_difference_from_previous_observation():
    snap = Snapshot({"str": 0})
    snap.snap({"str": 10})
    snap.snap({"str": 25})
    assert snap.get()["str"].delta == 15
    assert snap.get()["str"].value == 25


def test_value_equals_last_input():
    snap = Snapshot({"str": 0.1})
    snap.snap({"str": 0.30000000000000004})
    assert snap.get()["str"].value == 0.30000000000000004


def test_first_snap_without_init_has_no_delta():
    snap = Snapshot()
    snap.snap({"str": 3})
    assert snap.get()["str"].delta is None
    snap.snap({"str": 5})
    assert snap.get()["str"].delta == 2


def test_new_key_enters_without_delta():
    snap = Snapshot({"str": 0})
    snap.snap({"str": 1, "luck": 4})
    assert snap.get()["luck"].delta is None
    assert snap.get()["luck"].value == 4


def test_snap_of_mutated_mapping():
    stats = {"str": 0.0}
    snap = Snapshot(stats)
    stats["str"] += 7
    snap.snap(stats)
    assert snap.get()["str"].delta == 7


def test_changed():
    snap = Snapshot({"str": 0, "dex": 0})
    snap.snap({"str": 2, "dex": 0})
    assert list(snap.changed()) == ["str"]


def test_previous():
    c = Comparison(value=10, delta=4)
    assert c.previous == 6
    assert Comparison(value=10).previous == 10
