"""
Generated ad creatives
"""
from sqlalchemy import Column, Integer, String, Enum, Text, JSON, DateTime

from adcreative.models.base import OptimizerModel
from adcreative.models.enums import GenerationMode, CreativeStatus


class AdCreative(OptimizerModel):
    """
    A generated creative for an ad set.
    Content is never edited; a new variation is always a new row.
    """

    __tablename__ = "ad_creatives"

    id = Column(Integer, primary_key=True, index=True)
    ad_set_id = Column(String(100), nullable=False, index=True)

    # ============================================
    # Creative content
    # ============================================
    headline = Column(Text, nullable=False, default="")
    ad_copy = Column(Text, nullable=False, default="")
    call_to_action = Column(Text, nullable=False, default="")
    visual_direction = Column(Text, nullable=False, default="")
    target_audience = Column(Text, nullable=False, default="")
    hypothesis = Column(Text, nullable=False, default="")

    # ============================================
    # Generation metadata
    # ============================================
    mode = Column(Enum(GenerationMode), nullable=False, index=True)
    status = Column(Enum(CreativeStatus), default=CreativeStatus.DRAFT, nullable=False)

    # Origin snapshot for optimization-mode creatives
    # {"original_ad": ..., "original_score": ..., "optimization_target": ...}
    performance_data = Column(JSON, nullable=True)

    generated_at = Column(DateTime, nullable=False)
