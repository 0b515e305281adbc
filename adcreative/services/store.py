"""
Persistence access for the optimizer (create / find / groupBy).

One Store wraps one SQLAlchemy session; sessions come from the shared,
pooled engine in adcreative.core.database.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from adcreative.models import AdPerformanceRecord, AdCreative, ABTest, ABTestStatus

logger = logging.getLogger(__name__)


class Store:
    """Create/read/groupBy access over performance records, creatives and A/B tests"""

    def __init__(self, db: Session):
        self.db = db

    # ========================================
    # Performance records (append only)
    # ========================================

    def add_performance_records(self, records: Iterable[AdPerformanceRecord]) -> List[AdPerformanceRecord]:
        rows = list(records)
        if not rows:
            return rows
        self.db.add_all(rows)
        self.db.commit()
        logger.info(f"[Store] Stored {len(rows)} performance records")
        return rows

    @staticmethod
    def _ad_set_filter(ad_set_id: str):
        # Platform adset id when known, otherwise free-text match on the ad name
        return or_(
            AdPerformanceRecord.ad_set_id == ad_set_id,
            AdPerformanceRecord.ad_name.contains(ad_set_id, autoescape=True),
        )

    def find_performance_for_ad_set(
        self,
        ad_set_id: str,
        limit: Optional[int] = None,
        since: Optional[datetime] = None,
    ) -> List[AdPerformanceRecord]:
        """Records for an ad set, newest first"""
        query = self.db.query(AdPerformanceRecord).filter(self._ad_set_filter(ad_set_id))
        if since is not None:
            query = query.filter(AdPerformanceRecord.recorded_at >= since)
        query = query.order_by(AdPerformanceRecord.recorded_at.desc(), AdPerformanceRecord.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def group_performance_by_ad_name(self, ad_set_id: str, since: Optional[datetime] = None) -> List[dict]:
        """Per-ad totals computed in the database"""
        query = (
            self.db.query(
                AdPerformanceRecord.ad_name,
                func.count(AdPerformanceRecord.id),
                func.coalesce(func.sum(AdPerformanceRecord.impressions), 0),
                func.coalesce(func.sum(AdPerformanceRecord.clicks), 0),
                func.coalesce(func.sum(AdPerformanceRecord.spend), 0),
                func.coalesce(func.sum(AdPerformanceRecord.conversions), 0),
            )
            .filter(self._ad_set_filter(ad_set_id))
        )
        if since is not None:
            query = query.filter(AdPerformanceRecord.recorded_at >= since)
        rows = query.group_by(AdPerformanceRecord.ad_name).order_by(AdPerformanceRecord.ad_name).all()

        return [
            {
                "ad_name": ad_name,
                "records": int(count),
                "impressions": int(impressions),
                "clicks": int(clicks),
                "spend": float(spend),
                "conversions": int(conversions),
            }
            for ad_name, count, impressions, clicks, spend, conversions in rows
        ]

    # ========================================
    # Creatives
    # ========================================

    def create_creative(self, **fields) -> AdCreative:
        creative = AdCreative(**fields)
        self.db.add(creative)
        self.db.commit()
        self.db.refresh(creative)
        return creative

    def get_creative(self, creative_id: int) -> Optional[AdCreative]:
        return self.db.query(AdCreative).filter(AdCreative.id == creative_id).first()

    def find_creatives(self, ad_set_id: str) -> List[AdCreative]:
        return (
            self.db.query(AdCreative)
            .filter(AdCreative.ad_set_id == ad_set_id)
            .order_by(AdCreative.generated_at.desc(), AdCreative.id.desc())
            .all()
        )

    # ========================================
    # A/B tests
    # ========================================

    def create_ab_test(self, **fields) -> ABTest:
        ab_test = ABTest(**fields)
        self.db.add(ab_test)
        self.db.commit()
        self.db.refresh(ab_test)
        return ab_test

    def get_ab_test(self, test_id: int) -> Optional[ABTest]:
        return self.db.query(ABTest).filter(ABTest.id == test_id).first()

    def find_ab_tests(self, ad_set_id: str) -> List[ABTest]:
        return (
            self.db.query(ABTest)
            .filter(ABTest.ad_set_id == ad_set_id)
            .order_by(ABTest.start_date.desc(), ABTest.id.desc())
            .all()
        )

    def find_active_ab_tests(self, ending_before: Optional[datetime] = None) -> List[ABTest]:
        query = self.db.query(ABTest).filter(ABTest.status == ABTestStatus.ACTIVE)
        if ending_before is not None:
            query = query.filter(ABTest.end_date < ending_before)
        return query.all()

    def save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj
