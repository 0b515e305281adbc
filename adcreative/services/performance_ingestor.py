"""
Performance ingestion: pull ad telemetry, normalize it, persist it.

Without platform credentials a simulated source stands in so the optimizer
still has history to work from.
"""
import logging
import random
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from adcreative.core.time import utcnow
from adcreative.models import AdPerformanceRecord, PerformanceSourceType
from adcreative.services.meta_insights import PerformanceSource
from adcreative.services.store import Store

logger = logging.getLogger(__name__)

SIMULATED_AD_NAMES = [
    "Teal Shirt Ad A",
    "Teal Shirt Ad B",
    "Teal Shirt Ad C",
    "Blue Dress Ad A",
    "Blue Dress Ad B",
]
SIMULATED_RECORD_COUNT = 20


class SimulatedPerformanceSource(PerformanceSource):
    """
    Plausible pseudo-random insight rows:
    impressions 1,000-11,000, clicks <= 10% of impressions,
    spend $50-$550, conversions <= 10% of clicks.
    """

    def __init__(self, rng: Optional[random.Random] = None, count: int = SIMULATED_RECORD_COUNT):
        self.rng = rng or random.Random()
        self.count = count

    def fetch(self, ad_account_id: str = None, date_range: str = None) -> List[Dict[str, Any]]:
        rows = []
        for _ in range(self.count):
            ad_name = self.rng.choice(SIMULATED_AD_NAMES)
            impressions = self.rng.randint(1000, 10999)
            clicks = int(self.rng.random() * impressions * 0.1)
            spend = self.rng.randint(50, 549)
            conversions = int(self.rng.random() * clicks * 0.1)

            rows.append({
                "ad_name": ad_name,
                "impressions": impressions,
                "clicks": clicks,
                "spend": f"{spend:.2f}",
                "ctr": f"{clicks / impressions * 100:.2f}",
                "cpc": f"{spend / clicks:.2f}" if clicks else "0.00",
                "cpm": f"{spend / impressions * 1000:.2f}",
                "conversions": conversions,
            })
        return rows


def _to_int(value) -> int:
    if isinstance(value, list):
        # Meta action lists: [{"action_type": ..., "value": "3"}]
        return sum(_to_int(item.get("value")) for item in value if isinstance(item, dict))
    try:
        return max(int(float(value)), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _to_decimal(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not result.is_finite() or result < 0:
        return Decimal("0")
    return result


def normalize_record(
    raw: Dict[str, Any],
    ad_account_id: Optional[str],
    source: PerformanceSourceType,
) -> AdPerformanceRecord:
    """Map one raw insight row onto an AdPerformanceRecord"""
    impressions = _to_int(raw.get("impressions"))
    clicks = _to_int(raw.get("clicks"))
    spend = _to_decimal(raw.get("spend"))

    # Derive rates the platform did not report
    ctr = _to_decimal(raw.get("ctr")) if raw.get("ctr") not in (None, "") else (
        Decimal(clicks) / Decimal(impressions) * 100 if impressions else Decimal("0")
    )
    cpc = _to_decimal(raw.get("cpc")) if raw.get("cpc") not in (None, "") else (
        spend / Decimal(clicks) if clicks else Decimal("0")
    )
    cpm = _to_decimal(raw.get("cpm")) if raw.get("cpm") not in (None, "") else (
        spend / Decimal(impressions) * 1000 if impressions else Decimal("0")
    )

    return AdPerformanceRecord(
        ad_name=str(raw.get("ad_name") or raw.get("ad_id") or "unknown"),
        ad_set_id=str(raw["adset_id"]) if raw.get("adset_id") else None,
        ad_account_id=str(ad_account_id) if ad_account_id else None,
        impressions=impressions,
        clicks=clicks,
        conversions=_to_int(raw.get("conversions")),
        spend=spend,
        ctr=ctr.quantize(Decimal("0.0001")),
        cpc=cpc.quantize(Decimal("0.0001")),
        cpm=cpm.quantize(Decimal("0.0001")),
        source=source,
        performance_data=raw,
        recorded_at=utcnow(),
    )


class PerformanceIngestor:
    """Pulls performance rows from the platform (or simulation) and stores them"""

    def __init__(
        self,
        store: Store,
        source: Optional[PerformanceSource] = None,
        simulated_source: Optional[PerformanceSource] = None,
    ):
        self.store = store
        self.source = source
        self.simulated_source = simulated_source or SimulatedPerformanceSource()

    def ingest_performance_data(self, ad_account_id: str, date_range: str = "last_30d") -> List[AdPerformanceRecord]:
        if self.source is None:
            logger.warning("[PerformanceIngestor] Meta client not configured. Using simulated data.")
            raw_rows = self.simulated_source.fetch(ad_account_id, date_range)
            source_type = PerformanceSourceType.SIMULATED
        else:
            raw_rows = self.source.fetch(ad_account_id, date_range)
            source_type = PerformanceSourceType.META

        logger.info(f"[PerformanceIngestor] Ingested {len(raw_rows)} ad performance records for {ad_account_id}")

        records = [normalize_record(row, ad_account_id, source_type) for row in raw_rows]
        return self.store.add_performance_records(records)
