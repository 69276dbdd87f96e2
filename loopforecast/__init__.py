# loopforecast — Action list cost forecasting for loop-based idle games

from loopforecast._types import Resources, Stats, Skills, resolve_flag, compare
from loopforecast.requirement import Requirement, Req
from loopforecast.action import ActionRule, LoopDef, LoopEffects
from loopforecast.progression import Progression
from loopforecast.catalog import (
    ActionCatalog,
    ForecastConfig,
    TimeBuffBand,
    DEFAULT_TIME_BANDS,
    MissingCatalogEntryError,
    build_catalog,
)
from loopforecast.host import (
    HostContext,
    DungeonFloor,
    HostContextError,
    MissingExperienceCurveError,
)
from loopforecast.state import SimulationState
from loopforecast.snapshot import Snapshot, Comparison
from loopforecast.prediction import Prediction
from loopforecast.engine import LoopEngine, SegmentCostCache
from loopforecast.simulation import Simulation, simulate
from loopforecast.report import EntryReport, ForecastReport, LevelChange, build_entry_report
from loopforecast.formatting import format_duration, format_number, format_text_report

__all__ = [
    # Types
    "Resources",
    "Stats",
    "Skills",
    "resolve_flag",
    "compare",
    # Start conditions
    "Requirement",
    "Req",
    # Action rules
    "ActionRule",
    "LoopDef",
    "LoopEffects",
    "Progression",
    # Catalog
    "ActionCatalog",
    "ForecastConfig",
    "TimeBuffBand",
    "DEFAULT_TIME_BANDS",
    "MissingCatalogEntryError",
    "build_catalog",
    # Host
    "HostContext",
    "DungeonFloor",
    "HostContextError",
    "MissingExperienceCurveError",
    # State
    "SimulationState",
    "Snapshot",
    "Comparison",
    # Engine
    "Prediction",
    "LoopEngine",
    "SegmentCostCache",
    # Simulation
    "Simulation",
    "simulate",
    "EntryReport",
    "ForecastReport",
    "LevelChange",
    "build_entry_report",
    # Formatting
    "format_duration",
    "format_number",
    "format_text_report",
]
