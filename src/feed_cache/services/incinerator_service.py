"""Incinerator widget business logic.

Turns the raw stats feeds and the SOL price into display-ready merge
variables, cached as one snapshot.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from feed_cache.entities import SnapshotResultEntity
from feed_cache.repositories import IncineratorRepository, IncineratorStats, SolPriceRepository
from feed_cache.services.snapshot_cache_service import SnapshotCacheService

logger = logging.getLogger(__name__)

DISPLAY_TIMEZONE = ZoneInfo("America/New_York")
CHART_WEEKS = 12
RAW_KEY = "_raw"


class IncineratorService:
    """Computes incinerator metrics behind a stale-while-revalidate snapshot."""

    def __init__(
        self,
        snapshot: SnapshotCacheService,
        stats: IncineratorRepository,
        prices: SolPriceRepository,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._stats = stats
        self._prices = prices
        self._now = now or (lambda: datetime.now(timezone.utc))

    async def get_metrics(self) -> SnapshotResultEntity:
        """Get the metrics snapshot, recomputing it when needed."""
        return await self._snapshot.get(compute=self.compute)

    async def compute(self) -> dict[str, Any]:
        """Fetch every upstream feed and build the merge variables.

        Raises:
            UpstreamError: If a stats endpoint failed
        """
        stats = await self._stats.fetch_stats()
        sol_price = await self._prices.get_sol_price()
        if not sol_price:
            logger.warning("SOL price unknown, USD values will read as zero")
        return build_metrics(stats, sol_price, self._now())


def build_metrics(stats: IncineratorStats, sol_price: float, now: datetime) -> dict[str, Any]:
    """Derive the merge variables from raw stats.

    The returned dict also carries an internal ``_raw`` block with the
    source values, removed from the default response.
    """
    transactions = stats.cumulative_transactions
    users = stats.cumulative_users
    monthly_fees = stats.monthly_fees

    latest_transactions = transactions[-1] if transactions else None
    prev_transactions = transactions[-2] if len(transactions) > 1 else None
    latest_users = users[-1] if users else None
    prev_users = users[-2] if len(users) > 1 else None

    total_fees_sol = sum(point_value(p) for p in monthly_fees)
    current_month_fee_sol = point_value(monthly_fees[-1]) if monthly_fees else 0.0
    prev_month_fee_sol = point_value(monthly_fees[-2]) if len(monthly_fees) > 1 else 0.0

    total_sol_reclaimed = parse_float(stats.total_sol.get("totalSolReclaimed"))
    total_transactions = point_int(latest_transactions)
    total_users = point_int(latest_users)
    monthly_new_transactions = total_transactions - point_int(prev_transactions)
    monthly_new_users = total_users - point_int(prev_users)

    avg_sol_per_user = total_sol_reclaimed / total_users if total_users > 0 else 0.0
    avg_sol_per_tx = total_sol_reclaimed / total_transactions if total_transactions > 0 else 0.0

    total_sol_reclaimed_usd = total_sol_reclaimed * sol_price
    total_fees_usd = total_fees_sol * sol_price
    current_month_fee_usd = current_month_fee_sol * sol_price
    prev_month_fee_usd = prev_month_fee_sol * sol_price

    return {
        "sol_price": f"{sol_price:.2f}",
        "sol_price_formatted": format_usd(sol_price),
        "total_sol_reclaimed": format_sol(total_sol_reclaimed),
        "total_sol_reclaimed_raw": f"{total_sol_reclaimed:.2f}",
        "total_sol_reclaimed_usd": format_usd(total_sol_reclaimed_usd),
        "total_sol_reclaimed_usd_raw": f"{total_sol_reclaimed_usd:.2f}",
        "total_users": format_number(total_users),
        "total_users_raw": total_users,
        "total_transactions": format_number(total_transactions),
        "total_transactions_raw": total_transactions,
        "total_fees_sol": format_sol(total_fees_sol),
        "total_fees_sol_raw": f"{total_fees_sol:.4f}",
        "total_fees_usd": format_usd(total_fees_usd),
        "total_fees_usd_raw": f"{total_fees_usd:.2f}",
        "monthly_fees_sol": format_sol(current_month_fee_sol),
        "monthly_fees_sol_raw": f"{current_month_fee_sol:.4f}",
        "monthly_fees_usd": format_usd(current_month_fee_usd),
        "monthly_fees_usd_raw": f"{current_month_fee_usd:.2f}",
        "prev_month_fees_sol": format_sol(prev_month_fee_sol),
        "prev_month_fees_usd": format_usd(prev_month_fee_usd),
        "monthly_new_users": format_number(monthly_new_users),
        "monthly_new_users_raw": monthly_new_users,
        "monthly_new_transactions": format_number(monthly_new_transactions),
        "monthly_new_transactions_raw": monthly_new_transactions,
        "avg_sol_per_user": f"{avg_sol_per_user:.4f}",
        "avg_sol_per_user_display": format_sol(avg_sol_per_user),
        "avg_sol_per_tx": f"{avg_sol_per_tx:.6f}",
        "updated_at": now.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
        "updated_display": format_display_time(now),
        "weekly_profit_chart_data": json.dumps(weekly_profit_chart(stats.weekly_fees, sol_price)),
        RAW_KEY: {
            "totalSol": stats.total_sol,
            "latestTransactions": latest_transactions,
            "latestUsers": latest_users,
            "totalFeesSol": total_fees_sol,
            "solPrice": sol_price,
            "monthlyFeesCount": len(monthly_fees),
        },
    }


def weekly_profit_chart(weekly_fees: list[dict[str, Any]], sol_price: float) -> list[list[Any]]:
    """``[["M/D", usd], ...]`` for the last complete weeks (fees above 1 SOL)."""
    complete = [p for p in weekly_fees if point_value(p) > 1]
    chart = []
    for point in complete[-CHART_WEEKS:]:
        when = parse_date(point.get("date") or point.get("timestamp"))
        if when is None:
            continue
        chart.append([f"{when.month}/{when.day}", round(point_value(point) * sol_price)])
    return chart


def parse_float(value: Any) -> float:
    """Float from a number or numeric string; 0.0 when unusable."""
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def point_value(point: dict[str, Any] | None) -> float:
    """Numeric value of a time-series point."""
    return parse_float(point.get("value")) if point else 0.0


def point_int(point: dict[str, Any] | None) -> int:
    """Integer value of a time-series point (truncated)."""
    return int(point_value(point))


def parse_date(value: Any) -> datetime | None:
    """Parse an ISO date or datetime string as UTC."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_sol(sol: float) -> str:
    if sol >= 1_000_000:
        return f"{sol / 1_000_000:.2f}M"
    if sol >= 1_000:
        return f"{sol / 1_000:.2f}K"
    if sol >= 1:
        return f"{sol:.2f}"
    return f"{sol:.4f}"


def format_usd(usd: float) -> str:
    if usd >= 1_000_000:
        return f"${usd / 1_000_000:.2f}M"
    if usd >= 1_000:
        return f"${usd / 1_000:.2f}K"
    return f"${usd:.2f}"


def format_number(n: int) -> str:
    if n >= 1_000_000:
        return f"{n / 1_000_000:.2f}M"
    if n >= 1_000:
        return f"{n / 1_000:.1f}K"
    return f"{n:,}"


def format_display_time(when: datetime) -> str:
    """Short US Eastern timestamp, e.g. ``Mar 5, 3:07 PM``."""
    local = when.astimezone(DISPLAY_TIMEZONE)
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {hour}:{local:%M} {local:%p}"
