"""
Experiments component - Significance diff between control and test menus.

Compares each test item with the control item of the same name and keeps
only changes material enough to report to the restaurant owner.

Invariants:
- One result per test item, in test order; control-only items are not reported.
- An item absent from control is significant as ``new-item`` and nothing else.
- Recommendation comparison is set based (order independent).
- Thresholds are configuration, defaulting to DEFAULT_THRESHOLDS.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from menu_engine.domain.entities import MenuItem

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

# --- Pure Functions (Functional Core) ---


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def recommendation_delta(
    control: Sequence[str],
    test: Sequence[str],
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """
    Set difference of two recommendation lists.

    Returns:
        (added, removed); added keeps test order, removed keeps control order.
    """
    control_set = set(control)
    test_set = set(test)
    added = tuple(name for name in _unique(test) if name not in control_set)
    removed = tuple(name for name in _unique(control) if name not in test_set)
    return added, removed


def compare_items(
    control: MenuItem,
    test: MenuItem,
    thresholds: DiffThresholds = DEFAULT_THRESHOLDS,
) -> tuple[Change, ...]:
    """
    List the significant changes from ``control`` to ``test``.

    Each check is independent, so several kinds may be returned.
    """
    changes: list[Change] = []

    # Order: only when both sides have one
    if control.display_order is not None and test.display_order is not None:
        delta = test.display_order - control.display_order
        if abs(delta) >= thresholds.order_delta:
            kind = ChangeKind.PROMOTED if delta < 0 else ChangeKind.DEMOTED
            changes.append(
                Change(kind=kind, before=control.display_order, after=test.display_order)
            )

    if test.description != control.description:
        changes.append(
            Change(
                kind=ChangeKind.DESCRIPTION_CHANGED,
                before=control.description,
                after=test.description,
            )
        )

    added, removed = recommendation_delta(control.you_may_also_like, test.you_may_also_like)
    if len(added) + len(removed) >= thresholds.recommendation_delta:
        changes.append(
            Change(kind=ChangeKind.RECOMMENDATIONS_CHANGED, added=added, removed=removed)
        )

    # Exact string comparison: "$5.0" vs "$5.00" is a change
    if test.price != control.price:
        changes.append(
            Change(kind=ChangeKind.PRICE_CHANGED, before=control.price, after=test.price)
        )

    return tuple(changes)


def diff_menus(
    control: Iterable[MenuItem],
    test: Iterable[MenuItem],
    thresholds: DiffThresholds | None = None,
) -> list[DiffResult]:
    """
    Diff a test menu against its control menu.

    Args:
        control: Baseline items.
        test: Experimental items.
        thresholds: Materiality thresholds (defaults when None).

    Returns:
        One DiffResult per test item, in test order.
    """
    if thresholds is None:
        thresholds = DEFAULT_THRESHOLDS

    # Duplicate names: the last control item with a name is the baseline
    by_name = {item.name: item for item in control}

    results: list[DiffResult] = []
    for item in test:
        baseline = by_name.get(item.name)
        if baseline is None:
            results.append(
                DiffResult(
                    item=item,
                    control=None,
                    is_significant=True,
                    changes=(Change(kind=ChangeKind.NEW_ITEM),),
                )
            )
            continue

        changes = compare_items(baseline, item, thresholds)
        results.append(
            DiffResult(
                item=item,
                control=baseline,
                is_significant=len(changes) > 0,
                changes=changes,
            )
        )

    return results


def significant_only(results: Iterable[DiffResult]) -> list[DiffResult]:
    """Filter to results worth showing."""
    return [r for r in results if r.is_significant]


def explain_change(change: Change) -> ChangeExplanation:
    """Turn one change into owner-facing text."""
    kind = change.kind

    if kind is ChangeKind.NEW_ITEM:
        return ChangeExplanation(
            kind=kind,
            title="New Item Introduced",
            description=(
                "This item is new on the menu for this experiment. "
                "We are testing how customers respond to a new offering."
            ),
        )

    if kind in (ChangeKind.PROMOTED, ChangeKind.DEMOTED):
        direction = "earlier" if kind is ChangeKind.PROMOTED else "later"
        return ChangeExplanation(
            kind=kind,
            title="Prominence Changed",
            description=(
                f"This item now appears {direction} on the menu. A lower position "
                "number means the item is shown earlier. We are testing whether "
                "its visibility affects how often it is ordered."
            ),
            details=(f"From position: {change.before}", f"To position: {change.after}"),
        )

    if kind is ChangeKind.DESCRIPTION_CHANGED:
        return ChangeExplanation(
            kind=kind,
            title="Description Updated",
            description=(
                "The description of this item was rewritten. We are testing whether "
                "different wording makes it more appealing."
            ),
            details=(f"From: {change.before or 'N/A'}", f"To: {change.after or 'N/A'}"),
        )

    if kind is ChangeKind.RECOMMENDATIONS_CHANGED:
        details: list[str] = []
        if change.added:
            details.append(f"Added: {', '.join(change.added)}")
        if change.removed:
            details.append(f"Removed: {', '.join(change.removed)}")
        return ChangeExplanation(
            kind=kind,
            title="Recommendations Changed",
            description=(
                "The 'You May Also Like' suggestions for this item were adjusted. "
                "We are learning which pairings increase order size."
            ),
            details=tuple(details),
        )

    return ChangeExplanation(
        kind=kind,
        title="Price Adjusted",
        description=(
            "The price was changed for this test. We are measuring how the "
            "price affects purchasing decisions and revenue."
        ),
        details=(f"From: {change.before}", f"To: {change.after}"),
    )


def explain(result: DiffResult) -> list[ChangeExplanation]:
    """Explanations for every change of a result (empty if insignificant)."""
    return [explain_change(change) for change in result.changes]


def count_by_kind(results: Iterable[DiffResult]) -> dict[ChangeKind, int]:
    """Number of results carrying each change kind."""
    counter: Counter[ChangeKind] = Counter()
    for result in results:
        counter.update(set(result.kinds))
    return dict(counter)


# --- Component Entry Points ---


def _build_thresholds(rules: RulesPort | None) -> DiffThresholds:
    """Build thresholds from rules port."""
    if rules is None:
        return DEFAULT_THRESHOLDS

    return DiffThresholds(
        order_delta=rules.get_order_delta_threshold(),
        recommendation_delta=rules.get_recommendation_delta_threshold(),
    )


def run_diff(
    inp: DiffMenusInput,
    *,
    rules: RulesPort | None = None,
) -> DiffMenusOutput:
    """
    Diff control and test menus.

    Args:
        inp: Input containing control and test items.
        rules: Optional rules port for thresholds.

    Returns:
        DiffMenusOutput with one result per test item.
    """
    results = diff_menus(inp.control, inp.test, _build_thresholds(rules))
    return DiffMenusOutput(results=tuple(results))


def run_build_report(
    inp: BuildReportInput,
    *,
    rules: RulesPort | None = None,
) -> ExperimentReportOutput:
    """
    Build the owner-facing experiment report.

    Args:
        inp: Input containing control and test items.
        rules: Optional rules port for thresholds.

    Returns:
        ExperimentReportOutput with explained entries.
    """
    results = diff_menus(inp.control, inp.test, _build_thresholds(rules))
    significant = significant_only(results)
    shown = results if inp.include_insignificant else significant

    entries = tuple(
        ReportEntry(result=result, explanations=tuple(explain(result))) for result in shown
    )

    return ExperimentReportOutput(
        entries=entries,
        total_items=len(results),
        significant_count=len(significant),
        counts_by_kind=count_by_kind(significant),
    )


def run(
    inp: DiffMenusInput | BuildReportInput,
    *,
    rules: RulesPort | None = None,
) -> DiffMenusOutput | ExperimentReportOutput:
    """
    Main entry point for the experiments component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, DiffMenusInput):
        return run_diff(inp, rules=rules)
    elif isinstance(inp, BuildReportInput):
        return run_build_report(inp, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
