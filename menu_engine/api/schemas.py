from pydantic import BaseModel

from menu_engine.domain.entities import MenuItem, MenuVariant


# --- Feed ---
class FeedCategoryResponse(BaseModel):
    name: str
    items: list[MenuItem]


class FeedResponse(BaseModel):
    owner_id: str
    menu_id: str
    variant: MenuVariant
    active_overrides: dict[str, int]
    categories: list[FeedCategoryResponse]


# --- Experiments ---
class ChangeResponse(BaseModel):
    kind: str
    before: str | int | None = None
    after: str | int | None = None
    added: list[str] = []
    removed: list[str] = []


class ExplanationResponse(BaseModel):
    kind: str
    title: str
    description: str
    details: list[str] = []


class DiffResultResponse(BaseModel):
    name: str
    is_significant: bool
    changes: list[ChangeResponse]
    explanations: list[ExplanationResponse] = []


class DiffRequest(BaseModel):
    control: list[MenuItem]
    test: list[MenuItem]


class DiffResponse(BaseModel):
    results: list[DiffResultResponse]


class ExperimentReportResponse(BaseModel):
    owner_id: str
    menu_id: str
    total_items: int
    significant_count: int
    counts_by_kind: dict[str, int]
    entries: list[DiffResultResponse]
