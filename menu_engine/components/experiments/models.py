"""
Experiments component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from menu_engine.domain.entities import MenuItem

# --- Change Kinds ---


class ChangeKind(str, Enum):
    """Kind of material change between a control item and its test variant."""

    NEW_ITEM = "new-item"
    PROMOTED = "promoted"
    DEMOTED = "demoted"
    DESCRIPTION_CHANGED = "description-changed"
    PRICE_CHANGED = "price-changed"
    RECOMMENDATIONS_CHANGED = "recommendations-changed"


# --- Configuration ---


@dataclass(frozen=True)
class DiffThresholds:
    """Materiality thresholds for the significance filter."""

    # Minimum |test - control| display order delta
    order_delta: int = 5
    # Minimum added + removed recommendations
    recommendation_delta: int = 2


DEFAULT_THRESHOLDS = DiffThresholds()


# --- Diff Models ---


@dataclass(frozen=True)
class Change:
    """A single significant change, with what it changed from and to."""

    kind: ChangeKind
    before: str | int | None = None
    after: str | int | None = None
    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()


@dataclass(frozen=True)
class DiffResult:
    """Comparison of one test item against its control counterpart."""

    item: MenuItem
    control: MenuItem | None
    is_significant: bool
    changes: tuple[Change, ...] = ()

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def kinds(self) -> tuple[ChangeKind, ...]:
        return tuple(c.kind for c in self.changes)


@dataclass(frozen=True)
class ChangeExplanation:
    """Human-readable explanation of one change."""

    kind: ChangeKind
    title: str
    description: str
    details: tuple[str, ...] = ()


# --- Input Models ---


@dataclass(frozen=True)
class DiffMenusInput:
    """Input for diffing a control menu against a test menu."""

    control: tuple[MenuItem, ...]
    test: tuple[MenuItem, ...]


@dataclass(frozen=True)
class BuildReportInput:
    """Input for building a human-readable experiment report."""

    control: tuple[MenuItem, ...]
    test: tuple[MenuItem, ...]
    include_insignificant: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class DiffMenusOutput:
    """One result per test item, in test order."""

    results: tuple[DiffResult, ...]
    errors: list[str] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ReportEntry:
    """One reported item with its explanations."""

    result: DiffResult
    explanations: tuple[ChangeExplanation, ...]


@dataclass(frozen=True)
class ExperimentReportOutput:
    """Experiment report, significant items only unless asked otherwise."""

    entries: tuple[ReportEntry, ...]
    total_items: int
    significant_count: int
    counts_by_kind: dict[ChangeKind, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    success: bool = True
