from __future__ import annotations

from itertools import accumulate

from loopforecast.report import ForecastReport


def plot_forecast(
    report: ForecastReport,
    output_path: str | None = None,
    title: str = "",
) -> None:
    """Generate a 2-panel matplotlib view of a forecast.

    Requires matplotlib (optional dependency).
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError(
            "matplotlib is required for visualization. "
            "Install with: pip install loopforecast[viz]"
        )

    labels = [f"{i + 1}. {e.action_name}" for i, e in enumerate(report.entries)]
    positions = list(range(len(labels)))

    fig, axes = plt.subplots(2, 1, figsize=(12, 9), sharex=True)
    fig.suptitle(f"loopforecast: {title}" if title else "loopforecast", fontsize=14)

    # 1. Mana spent per entry, invalid entries in red
    ax1 = axes[0]
    colors = ["tab:blue" if e.is_valid else "tab:red" for e in report.entries]
    ax1.bar(positions, [e.mana_spent for e in report.entries], color=colors)
    ax1.set_ylabel("Mana")
    ax1.set_title("Mana Spent per Entry")
    ax1.grid(True, alpha=0.3)

    # 2. Cumulative real time
    ax2 = axes[1]
    ax2.plot(positions, list(accumulate(e.time for e in report.entries)), marker="o")
    ax2.set_ylabel("Time (s)")
    ax2.set_title("Cumulative Real Time")
    ax2.set_xticks(positions)
    ax2.set_xticklabels(labels, rotation=60, ha="right", fontsize=7)
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        plt.savefig(output_path, dpi=150)
    else:
        plt.show()
