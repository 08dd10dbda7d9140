from collections.abc import Sequence

from fastapi import APIRouter, Depends

from menu_engine.api.deps import get_rules_adapter
from menu_engine.api.schemas import (
    ChangeResponse,
    DiffRequest,
    DiffResponse,
    DiffResultResponse,
    ExplanationResponse,
)
from menu_engine.components.experiments import (
    ChangeExplanation,
    DiffMenusInput,
    DiffResult,
    explain,
    run_diff,
)
from menu_engine.rules.adapter import RulesAdapter

router = APIRouter()


def to_result_response(
    result: DiffResult,
    explanations: Sequence[ChangeExplanation] | None = None,
) -> DiffResultResponse:
    """Serialize a diff result with its explanations, computed when not given."""
    if explanations is None:
        explanations = explain(result)
    return DiffResultResponse(
        name=result.name,
        is_significant=result.is_significant,
        changes=[
            ChangeResponse(
                kind=change.kind.value,
                before=change.before,
                after=change.after,
                added=list(change.added),
                removed=list(change.removed),
            )
            for change in result.changes
        ],
        explanations=[
            ExplanationResponse(
                kind=explanation.kind.value,
                title=explanation.title,
                description=explanation.description,
                details=list(explanation.details),
            )
            for explanation in explanations
        ],
    )


@router.post("/diff", response_model=DiffResponse)
def diff_menus(
    req: DiffRequest,
    rules: RulesAdapter = Depends(get_rules_adapter),
) -> DiffResponse:
    """Diff posted control and test item lists."""
    out = run_diff(DiffMenusInput(control=tuple(req.control), test=tuple(req.test)), rules=rules)
    return DiffResponse(results=[to_result_response(result) for result in out.results])
