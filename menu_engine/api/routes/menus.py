from fastapi import APIRouter, Depends, HTTPException

from menu_engine.adapters.clock import SystemClock
from menu_engine.api.deps import get_clock, get_menu_source, get_rules_adapter
from menu_engine.api.routes.experiments import to_result_response
from menu_engine.api.schemas import ExperimentReportResponse, FeedCategoryResponse, FeedResponse
from menu_engine.components.experiments import BuildReportInput, run_build_report
from menu_engine.components.ordering import BuildFeedInput, active_overrides, run_build_feed
from menu_engine.domain.entities import MenuVariant
from menu_engine.ports.menu_source import MenuSourceError, MenuSourcePort
from menu_engine.rules.adapter import RulesAdapter

router = APIRouter()


@router.get("/{owner_id}/{menu_id}/feed", response_model=FeedResponse)
async def get_feed(
    owner_id: str,
    menu_id: str,
    variant: MenuVariant = "control",
    source: MenuSourcePort = Depends(get_menu_source),
    clock: SystemClock = Depends(get_clock),
) -> FeedResponse:
    """Menu feed in resolved display order, grouped by category."""
    try:
        snapshot = await source.fetch_menu(owner_id, menu_id, variant)
    except MenuSourceError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    now = clock.now_utc()
    feed = run_build_feed(
        BuildFeedInput(items=snapshot.items, schedules=snapshot.override_schedules, now_utc=now)
    )

    return FeedResponse(
        owner_id=owner_id,
        menu_id=menu_id,
        variant=variant,
        active_overrides=active_overrides(snapshot.override_schedules, now),
        categories=[
            FeedCategoryResponse(name=category.name, items=list(category.items))
            for category in feed.categories
        ],
    )


@router.get("/{owner_id}/{menu_id}/experiment-report", response_model=ExperimentReportResponse)
async def get_experiment_report(
    owner_id: str,
    menu_id: str,
    include_insignificant: bool = False,
    source: MenuSourcePort = Depends(get_menu_source),
    rules: RulesAdapter = Depends(get_rules_adapter),
) -> ExperimentReportResponse:
    """Significant control vs test differences of a menu."""
    try:
        control, test = await source.fetch_experiment(owner_id, menu_id)
    except MenuSourceError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    report = run_build_report(
        BuildReportInput(
            control=control.items,
            test=test.items,
            include_insignificant=include_insignificant,
        ),
        rules=rules,
    )

    return ExperimentReportResponse(
        owner_id=owner_id,
        menu_id=menu_id,
        total_items=report.total_items,
        significant_count=report.significant_count,
        counts_by_kind={kind.value: count for kind, count in report.counts_by_kind.items()},
        entries=[
            to_result_response(entry.result, entry.explanations) for entry in report.entries
        ],
    )
