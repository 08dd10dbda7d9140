from pydantic import BaseModel, ConfigDict, Field


class ExperimentRules(BaseModel):
    order_delta: int = Field(default=5, ge=1)
    recommendation_delta: int = Field(default=2, ge=1)


class EngagementRules(BaseModel):
    flush_interval_seconds: float = Field(default=30.0, gt=0)
    visibility_threshold: float = Field(default=0.75, gt=0, le=1)
    default_category: str = "Other"


class BackendRules(BaseModel):
    base_url: str = "https://api.bityfan.com"
    menu_path: str = "/ris/v1/menu"
    analytics_path: str = "/ris/v1/menu/analytics"
    timeout_seconds: float = Field(default=10.0, gt=0)


class Rules(BaseModel):
    model_config = ConfigDict(extra="forbid")

    experiments: ExperimentRules = ExperimentRules()
    engagement: EngagementRules = EngagementRules()
    backend: BackendRules = BackendRules()
