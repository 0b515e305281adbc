"""
Meta Marketing API insights client
Fetches ad-level performance rows for an ad account
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from adcreative.core.config import settings

logger = logging.getLogger(__name__)

INSIGHT_FIELDS = [
    "campaign_name",
    "adset_id",
    "adset_name",
    "ad_id",
    "ad_name",
    "impressions",
    "clicks",
    "spend",
    "ctr",
    "cpc",
    "cpm",
    "conversions",
]

# Meta date_preset values accepted as a date range
DATE_PRESETS = {
    "today", "yesterday", "this_month", "last_month", "this_quarter", "maximum",
    "last_3d", "last_7d", "last_14d", "last_28d", "last_30d", "last_90d",
    "last_week_mon_sun", "last_week_sun_sat", "last_quarter", "last_year",
    "this_week_mon_today", "this_week_sun_today", "this_year",
}


class PerformanceSource:
    """Interface of the ad-platform performance collaborator"""

    def fetch(self, ad_account_id: str, date_range: str) -> List[Dict[str, Any]]:
        raise NotImplementedError


class MetaInsightsClient(PerformanceSource):
    """
    Graph API client for `/act_{ad_account_id}/insights` at ad level.
    Follows `paging.next` until exhausted; HTTP errors propagate.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.access_token = access_token or settings.META_ACCESS_TOKEN
        self.base_url = base_url or settings.meta_api_url
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=settings.META_API_TIMEOUT_SECONDS)
        return self._client

    def close(self):
        """Close the HTTP client"""
        if self._client:
            self._client.close()
            self._client = None

    @staticmethod
    def _account_path(ad_account_id: str) -> str:
        account = str(ad_account_id)
        return account if account.startswith("act_") else f"act_{account}"

    @staticmethod
    def _date_params(date_range: str) -> Dict[str, str]:
        if date_range in DATE_PRESETS:
            return {"date_preset": date_range}
        # JSON time_range, e.g. {"since":"2024-01-01","until":"2024-01-31"}
        return {"time_range": date_range}

    def fetch(self, ad_account_id: str, date_range: str = "last_30d") -> List[Dict[str, Any]]:
        url = f"{self.base_url}/{self._account_path(ad_account_id)}/insights"
        params: Optional[Dict[str, Any]] = {
            "access_token": self.access_token,
            "fields": ",".join(INSIGHT_FIELDS),
            "level": "ad",
            "limit": 500,
            **self._date_params(date_range),
        }

        rows: List[Dict[str, Any]] = []
        while url:
            response = self.client.get(url, params=params)
            response.raise_for_status()
            data = response.json()

            if "error" in data:
                message = data["error"].get("message", "unknown error")
                logger.error(f"[MetaInsights] API error for {ad_account_id}: {message}")
                raise httpx.HTTPStatusError(
                    f"Meta API error: {message}", request=response.request, response=response
                )

            page = data.get("data", [])
            rows.extend(page)
            logger.info(f"[MetaInsights] Fetched {len(page)} rows (Total: {len(rows)})")

            # Next URL already carries every parameter
            url = (data.get("paging") or {}).get("next")
            params = None

        return rows
