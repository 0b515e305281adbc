"""
Ad performance records (append-only telemetry snapshots).

Records are correlated to an ad set by `ad_set_id` when the platform reports one,
otherwise by substring match on the free-text `ad_name`.
"""
from sqlalchemy import Column, Integer, String, Enum, JSON, Numeric, DateTime

from adcreative.models.base import OptimizerModel
from adcreative.models.enums import PerformanceSourceType


class AdPerformanceRecord(OptimizerModel):
    """One ingested performance row for an ad"""

    __tablename__ = "ad_performance_records"

    id = Column(Integer, primary_key=True, index=True)

    # Match keys
    ad_name = Column(String(255), nullable=False, index=True)
    ad_set_id = Column(String(100), nullable=True, index=True)
    ad_account_id = Column(String(100), nullable=True, index=True)

    # Core metrics
    impressions = Column(Integer, default=0, nullable=False)
    clicks = Column(Integer, default=0, nullable=False)
    conversions = Column(Integer, default=0, nullable=False)
    spend = Column(Numeric(15, 2), default=0, nullable=False)
    ctr = Column(Numeric(12, 4), default=0, nullable=False)
    cpc = Column(Numeric(12, 4), default=0, nullable=False)
    cpm = Column(Numeric(12, 4), default=0, nullable=False)

    source = Column(Enum(PerformanceSourceType), default=PerformanceSourceType.META, nullable=False)

    # Raw platform payload
    performance_data = Column(JSON, nullable=True)

    recorded_at = Column(DateTime, nullable=False, index=True)
