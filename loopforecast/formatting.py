from __future__ import annotations

from loopforecast.report import EntryReport, ForecastReport, LevelChange

SKILL_LABELS: dict[str, str] = {
    "chronomancy": "CHRO",
    "crafting": "CRAFT",
    "pyromancy": "PYRO",
    "alchemy": "ALCH",
    "combat": "COMB",
    "practical": "PRACT",
}

_SUFFIXES = ["", "K", "M", "B", "T", "Qa", "Qi", "Sx", "Sp", "Oc", "No", "Dc"]


def format_number(value: float, decimals: int = 2) -> str:
    """Compact number with a thousands suffix, e.g. ``12.5K``."""
    magnitude = abs(value)
    index = 0
    while magnitude >= 1000 and index < len(_SUFFIXES) - 1:
        magnitude /= 1000
        index += 1
    if index == 0:
        if float(value).is_integer():
            return str(int(value))
        return f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    sign = "-" if value < 0 else ""
    text = f"{magnitude:.{decimals}f}".rstrip("0").rstrip(".")
    return f"{sign}{text}{_SUFFIXES[index]}"


def format_duration(report: ForecastReport) -> str:
    """Total real time as ``HH:MM:SS.t``."""
    hours, minutes, seconds, tenths = report.total_time_parts()
    sign = "-" if report.total_real_time < 0 else ""
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}.{tenths}"


def _levels(changes: dict[str, LevelChange], labels: dict[str, str] | None = None) -> list[str]:
    parts: list[str] = []
    for name, change in changes.items():
        label = (labels or {}).get(name, name.upper())
        parts.append(
            f"{label} {format_number(change.level, 1)} (+{format_number(change.gained, 1)})"
        )
    return parts


def format_entry(index: int, entry: EntryReport) -> str:
    marker = "  " if entry.is_valid else "!!"
    resources = ", ".join(
        f"{k}={format_number(v)}" for k, v in entry.visible_resources().items()
    )
    levels = _levels(entry.stat_levels) + _levels(entry.skill_levels, SKILL_LABELS)
    line = f"{marker}{index:>3}. {entry.action_name} x{entry.repetitions}"
    if resources:
        line += f"  [{resources}]"
    if levels:
        line += "  " + "; ".join(levels)
    return line


def format_text_report(report: ForecastReport, title: str = "") -> str:
    """Format a forecast for console output."""
    lines: list[str] = []

    header = " loopforecast Report " + (f"({title}) " if title else "")
    lines.append("=" * 30 + header + "=" * 30)

    if report.entries:
        lines.append("ACTIONS:")
        for i, entry in enumerate(report.entries, start=1):
            lines.append(format_entry(i, entry))
        lines.append("")

    lines.append("TOTALS:")
    lines.append(f"  Mana: {format_number(report.total_mana_spent)}")
    lines.append(f"  Time: {format_duration(report)}")
    if report.cancelled:
        lines.append("  (cancelled before the end of the list)")
    lines.append("")

    invalid = [e.action_name for e in report.entries if not e.is_valid]
    if invalid:
        lines.append(f"SUMMARY: out of mana at {len(invalid)} entr{'y' if len(invalid) == 1 else 'ies'}")
    else:
        lines.append("SUMMARY: every entry is affordable")

    return "\n".join(lines)
