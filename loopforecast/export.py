from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from loopforecast.report import ForecastReport


def report_to_dict(report: ForecastReport) -> dict[str, Any]:
    """Plain-data view of a forecast, suitable for JSON."""
    return {
        "total_mana_spent": report.total_mana_spent,
        "total_real_time": report.total_real_time,
        "cancelled": report.cancelled,
        "is_valid": report.is_valid,
        "entries": [
            {
                "action_name": e.action_name,
                "repetitions": e.repetitions,
                "is_valid": e.is_valid,
                "mana_spent": e.mana_spent,
                "time": e.time,
                "resources": dict(e.resources),
                "stat_levels": {k: asdict(v) for k, v in e.stat_levels.items()},
                "skill_levels": {k: asdict(v) for k, v in e.skill_levels.items()},
            }
            for e in report.entries
        ],
    }


def export_json(report: ForecastReport, path: str | Path) -> None:
    """Export the full forecast as JSON."""
    with open(str(path), "w") as f:
        json.dump(report_to_dict(report), f, indent=2)


def export_csv(report: ForecastReport, path: str | Path) -> None:
    """Export forecast data as CSV files.

    Creates two files:
      - {path}_entries.csv
      - {path}_levels.csv
    """
    base = str(path)

    with open(f"{base}_entries.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            ["index", "action_name", "repetitions", "is_valid", "mana_spent", "time", "resources_json"]
        )
        for i, e in enumerate(report.entries):
            writer.writerow([
                i,
                e.action_name,
                e.repetitions,
                e.is_valid,
                e.mana_spent,
                e.time,
                json.dumps(e.resources),
            ])

    with open(f"{base}_levels.csv", "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["index", "action_name", "kind", "name", "level", "gained"])
        for i, e in enumerate(report.entries):
            for kind, changes in (("stat", e.stat_levels), ("skill", e.skill_levels)):
                for name, change in changes.items():
                    writer.writerow([i, e.action_name, kind, name, change.level, change.gained])
