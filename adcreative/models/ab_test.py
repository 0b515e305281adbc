"""
Two-armed A/B tests between generated creatives
"""
from sqlalchemy import Column, Integer, String, Enum, JSON, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from adcreative.models.base import OptimizerModel
from adcreative.models.enums import ABTestStatus


class ABTest(OptimizerModel):
    """A/B test record"""

    __tablename__ = "ab_tests"

    id = Column(Integer, primary_key=True, index=True)
    ad_set_id = Column(String(100), nullable=False, index=True)
    test_name = Column(String(255), nullable=False)

    # ============================================
    # Variations
    # ============================================
    variation_a_id = Column(Integer, ForeignKey("ad_creatives.id"), nullable=False)
    variation_b_id = Column(Integer, ForeignKey("ad_creatives.id"), nullable=False)

    # ============================================
    # Configuration
    # ============================================
    duration = Column(Integer, nullable=False)  # days
    budget = Column(Numeric(12, 2), nullable=False, default=0)
    metrics = Column(JSON, nullable=False, default=list)

    # ============================================
    # Lifecycle
    # ============================================
    status = Column(Enum(ABTestStatus), default=ABTestStatus.ACTIVE, nullable=False, index=True)
    # Naive UTC, see adcreative.core.time
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    # ============================================
    # Relationships
    # ============================================
    variation_a = relationship("AdCreative", foreign_keys=[variation_a_id], lazy="joined")
    variation_b = relationship("AdCreative", foreign_keys=[variation_b_id], lazy="joined")

    @property
    def is_terminal(self) -> bool:
        return self.status in (ABTestStatus.COMPLETED, ABTestStatus.CANCELLED)
