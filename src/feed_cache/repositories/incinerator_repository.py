"""sol-incinerator stats API access."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from feed_cache.config import settings
from feed_cache.repositories.upstream_fetcher import UpstreamError, UpstreamFetcher

logger = logging.getLogger(__name__)

API_BASE = "https://sol-incinerator.dev/api"

# Short label used in error messages -> endpoint path
ENDPOINTS = {
    "totalSol": "stats/totalSolReclaimed",
    "monthlyFees": "stats/charts/monthly/fees",
    "weeklyFees": "stats/charts/weekly/fees",
    "transactions": "stats/cumulativeTransactions",
    "users": "stats/charts/monthly/cumulative_users",
}


@dataclass(frozen=True)
class IncineratorStats:
    """Raw payloads of the five stats endpoints."""

    total_sol: dict[str, Any]
    monthly_fees: list[dict[str, Any]]
    weekly_fees: list[dict[str, Any]]
    cumulative_transactions: list[dict[str, Any]]
    cumulative_users: list[dict[str, Any]]


class IncineratorRepository:
    """Fetches all incinerator stats concurrently through the retrying fetcher."""

    def __init__(
        self,
        fetcher: UpstreamFetcher,
        api_key: str | None = None,
        base_url: str = API_BASE,
    ) -> None:
        self._fetcher = fetcher
        self._api_key = api_key or settings.cinder_api_key or ""
        self._base_url = base_url.rstrip("/")

    async def fetch_stats(self) -> IncineratorStats:
        """Fetch every stats endpoint in parallel.

        Returns:
            IncineratorStats with the decoded payloads

        Raises:
            UpstreamError: If any endpoint answered with a non-2xx status
            httpx.TransportError: If any endpoint was unreachable after retries
        """
        headers = {"Authorization": self._api_key}
        labels = list(ENDPOINTS)
        responses = await asyncio.gather(
            *(
                self._fetcher.fetch("GET", f"{self._base_url}/{ENDPOINTS[label]}", headers=headers)
                for label in labels
            )
        )
        by_label = dict(zip(labels, responses))

        errors = [
            f"{label}={response.status_code}"
            for label, response in by_label.items()
            if not response.is_success
        ]
        if errors:
            raise UpstreamError(f"API errors: {', '.join(errors)}")

        try:
            return IncineratorStats(
                total_sol=by_label["totalSol"].json(),
                monthly_fees=by_label["monthlyFees"].json(),
                weekly_fees=by_label["weeklyFees"].json(),
                cumulative_transactions=by_label["transactions"].json(),
                cumulative_users=by_label["users"].json(),
            )
        except ValueError as e:
            raise UpstreamError(f"Malformed stats payload: {e}") from e
