"""
Experiments component - Control vs test menu diff and reporting.
"""

from .component import (
    compare_items,
    count_by_kind,
    diff_menus,
    explain,
    explain_change,
    recommendation_delta,
    run,
    run_build_report,
    run_diff,
    significant_only,
)
from .models import (
    DEFAULT_THRESHOLDS,
    BuildReportInput,
    Change,
    ChangeExplanation,
    ChangeKind,
    DiffMenusInput,
    DiffMenusOutput,
    DiffResult,
    DiffThresholds,
    ExperimentReportOutput,
    ReportEntry,
)
from .ports import RulesPort

__all__ = [
    # Component functions
    "run",
    "run_diff",
    "run_build_report",
    # Pure functions
    "compare_items",
    "count_by_kind",
    "diff_menus",
    "explain",
    "explain_change",
    "recommendation_delta",
    "significant_only",
    # Models
    "DEFAULT_THRESHOLDS",
    "BuildReportInput",
    "Change",
    "ChangeExplanation",
    "ChangeKind",
    "DiffMenusInput",
    "DiffMenusOutput",
    "DiffResult",
    "DiffThresholds",
    "ExperimentReportOutput",
    "ReportEntry",
    # Ports
    "RulesPort",
]
