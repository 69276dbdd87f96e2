"""MCP server wrapping the forecaster for interactive AI planning."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from mcp.server.fastmcp import FastMCP

from loopforecast.catalog import ActionCatalog
from loopforecast.formatting import format_duration, format_text_report
from loopforecast.host import HostContext
from loopforecast.simulation import normalize_entry, simulate

# Maximum entries per predict() call
_MAX_ENTRIES = 500
# Maximum repetitions of a single entry
_MAX_LOOPS = 100_000


@dataclass
class _ForecastHolder:
    """Holds the catalog and host context the tools forecast against."""

    catalog: ActionCatalog
    host: HostContext


def _round(value: Any, digits: int = 2) -> Any:
    if isinstance(value, float):
        return round(value, digits)
    return value


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_catalog_info(holder: _ForecastHolder) -> dict[str, Any]:
    catalog = holder.catalog
    return {
        "name": catalog.config.name,
        "starting_mana": catalog.config.starting_mana,
        "actions": [
            {
                "name": r.name,
                "kind": "loop" if r.has_loop else "instant",
                "affected": list(r.affected),
            }
            for r in catalog.rules
        ],
        "stats": list(holder.host.stat_names),
        "skills": sorted(holder.host.skill_totals()),
    }


def _tool_get_action_info(holder: _ForecastHolder, name: str) -> dict[str, Any]:
    rule = holder.catalog.get(name)
    if rule is None:
        return {"error": f"Unknown action: {name!r}"}

    result: dict[str, Any] = {
        "name": rule.name,
        "description": rule.description,
        "stat_cost": dict(rule.stat_cost),
        "exp_multiplier": rule.exp_multiplier,
        "mana_cost": _round(rule.mana_cost()),
        "affected": list(rule.affected),
        "kind": "loop" if rule.has_loop else "instant",
    }
    if rule.loop is not None:
        max_segments = rule.loop.max_segments(rule)
        result["segments"] = rule.segments
        result["loop_stats"] = list(rule.loop_stats)
        result["max_segments"] = None if max_segments == float("inf") else max_segments
        result["historical_loops"] = holder.host.historical_total(rule)
    return result


def _tool_predict(
    holder: _ForecastHolder, actions: list[dict[str, Any]]
) -> dict[str, Any]:
    if len(actions) > _MAX_ENTRIES:
        return {"error": f"Action list cannot exceed {_MAX_ENTRIES} entries"}
    try:
        entries = [normalize_entry(a) for a in actions]
    except (KeyError, TypeError, ValueError) as e:
        return {"error": f"Invalid action entry: {e}"}
    for name, loops in entries:
        if loops < 0 or loops > _MAX_LOOPS:
            return {"error": f"Loops for {name!r} must be between 0 and {_MAX_LOOPS}"}

    report = simulate(entries, holder.catalog, holder.host)
    unknown = sorted({name for name, _ in entries if name not in holder.catalog})

    result: dict[str, Any] = {
        "total_mana_spent": _round(report.total_mana_spent),
        "total_real_time": _round(report.total_real_time),
        "total_time_display": format_duration(report),
        "is_valid": report.is_valid,
        "entries": [
            {
                "action_name": e.action_name,
                "repetitions": e.repetitions,
                "is_valid": e.is_valid,
                "resources": {k: _round(v) for k, v in e.visible_resources().items()},
                "stat_levels": {
                    k: {"level": _round(v.level), "gained": _round(v.gained)}
                    for k, v in e.stat_levels.items()
                },
                "skill_levels": {
                    k: {"level": _round(v.level), "gained": _round(v.gained)}
                    for k, v in e.skill_levels.items()
                },
            }
            for e in report.entries
        ],
    }
    if unknown:
        result["skipped_unknown"] = unknown
    return result


def _tool_predict_text(
    holder: _ForecastHolder, actions: list[dict[str, Any]]
) -> dict[str, Any]:
    try:
        entries = [normalize_entry(a) for a in actions[:_MAX_ENTRIES]]
    except (KeyError, TypeError, ValueError) as e:
        return {"error": f"Invalid action entry: {e}"}
    report = simulate(entries, holder.catalog, holder.host)
    return {"report": format_text_report(report, holder.catalog.config.name)}


# ── Server factory ──────────────────────────────────────────────────


def create_server(catalog: ActionCatalog, host: HostContext) -> FastMCP:
    """Create an MCP server forecasting against the given catalog and host."""
    holder = _ForecastHolder(catalog=catalog, host=host)

    mcp = FastMCP(
        name=f"loopforecast: {catalog.config.name}",
    )

    @mcp.tool()
    def get_catalog_info() -> dict[str, Any]:
        """Get the catalog overview: actions, their kind and affected resources, stats, skills."""
        return _tool_get_catalog_info(holder)

    @mcp.tool()
    def get_action_info(name: str) -> dict[str, Any]:
        """Get details for one action: stat costs, mana cost, loop segments."""
        return _tool_get_action_info(holder, name)

    @mcp.tool()
    def predict(actions: list[dict[str, Any]]) -> dict[str, Any]:
        """Forecast an action list given as [{"name": ..., "loops": ...}]. Returns per-entry resources, validity and level-ups plus totals."""
        return _tool_predict(holder, actions)

    @mcp.tool()
    def predict_text(actions: list[dict[str, Any]]) -> dict[str, Any]:
        """Forecast an action list and return a human-readable report."""
        return _tool_predict_text(holder, actions)

    return mcp
