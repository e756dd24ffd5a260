"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every HTTP 500."""

    error: str = Field(..., description="Short human-readable failure message")


class HealthCheckResponse(BaseModel):
    """Response DTO for the service-level health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the key-value store is reachable")
    background_tasks: dict[str, int] = Field(
        default_factory=dict,
        description="Background runner counters",
    )


class CacheInfo(BaseModel):
    """Pool description included in debug payloads."""

    cached_count: int = Field(..., ge=0, description="Items currently pooled")
    fetched_at: str = Field(..., description="ISO timestamp of the last append")


class NameItem(BaseModel):
    """Single name with its meaning."""

    name: str
    meaning: str


class NamesMergeVariables(BaseModel):
    """Merge variables for the names widget."""

    name1: str
    meaning1: str
    name2: str
    meaning2: str
    name3: str
    meaning3: str
    name4: str
    meaning4: str


class NamesDebugResponse(BaseModel):
    """Debug payload for ``/names/api``."""

    names: list[NameItem]
    recentNames: list[str] = Field(default_factory=list)
    cacheInfo: CacheInfo | None = None
    source: str = Field(..., description="'pool' or 'upstream'")
    raw: bool = True


class RecipeMergeVariables(BaseModel):
    """Merge variables for the recipes widget."""

    title: str
    cuisine: str
    cook_time: str
    ingredients: str
    instructions: str
    image_url: str


class IncineratorMergeVariables(BaseModel):
    """Merge variables for the incinerator widget."""

    sol_price: str
    sol_price_formatted: str
    total_sol_reclaimed: str
    total_sol_reclaimed_raw: str
    total_sol_reclaimed_usd: str
    total_sol_reclaimed_usd_raw: str
    total_users: str
    total_users_raw: int
    total_transactions: str
    total_transactions_raw: int
    total_fees_sol: str
    total_fees_sol_raw: str
    total_fees_usd: str
    total_fees_usd_raw: str
    monthly_fees_sol: str
    monthly_fees_sol_raw: str
    monthly_fees_usd: str
    monthly_fees_usd_raw: str
    prev_month_fees_sol: str
    prev_month_fees_usd: str
    monthly_new_users: str
    monthly_new_users_raw: int
    monthly_new_transactions: str
    monthly_new_transactions_raw: int
    avg_sol_per_user: str
    avg_sol_per_user_display: str
    avg_sol_per_tx: str
    updated_at: str
    updated_display: str
    weekly_profit_chart_data: str

    model_config = {"extra": "ignore"}

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "IncineratorMergeVariables":
        """Build from snapshot data, dropping internal keys."""
        return cls.model_validate({k: v for k, v in data.items() if not k.startswith("_")})
