"""
Optimizer request/response schemas

Request bodies accept snake_case or camelCase keys.
"""
from typing import Optional, List, Dict, Any
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from adcreative.core.config import settings

from adcreative.models.enums import (
    GenerationMode, CreativeStatus, ABTestStatus, PerformanceSourceType, BanditAction
)


class CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================
# Requests
# ============================================

class ProductContextIn(CamelRequest):
    """Product details for generation prompts; missing fields use defaults"""

    name: Optional[str] = None
    price: Optional[str] = None
    category: Optional[str] = None
    target_audience: Optional[str] = None


class IngestRequest(CamelRequest):
    date_range: str = "last_30d"


class OptimizeRequest(CamelRequest):
    exploration_rate: float = Field(default_factory=lambda: settings.DEFAULT_EXPLORATION_RATE, ge=0.0, le=1.0)
    learning_rate: float = Field(default_factory=lambda: settings.DEFAULT_LEARNING_RATE, ge=0.0, le=1.0)
    product: Optional[ProductContextIn] = None


class GenerateVariationRequest(CamelRequest):
    mode: GenerationMode = GenerationMode.EXPLORATION
    product: Optional[ProductContextIn] = None


class ABTestCreateRequest(CamelRequest):
    test_name: str = "Ad Creative A/B Test"
    duration: int = Field(7, ge=1)
    budget: Decimal = Field(Decimal("100"), ge=0)
    metrics: List[str] = ["ctr", "cpc", "conversions"]
    product: Optional[ProductContextIn] = None


# ============================================
# Responses
# ============================================

class AdCreativeResponse(BaseModel):
    id: int
    ad_set_id: str
    headline: str
    ad_copy: str
    call_to_action: str
    visual_direction: str
    target_audience: str
    hypothesis: str
    mode: GenerationMode
    status: CreativeStatus
    performance_data: Optional[Dict[str, Any]] = None
    generated_at: datetime

    class Config:
        from_attributes = True


class ParsedCreativeResponse(BaseModel):
    headline: str = ""
    ad_copy: str = ""
    call_to_action: str = ""
    visual_direction: str = ""
    target_audience: str = ""
    hypothesis: str = ""


class VariationResponse(BaseModel):
    ad_creative: AdCreativeResponse
    mode: GenerationMode
    generated_content: ParsedCreativeResponse
    original_ad: Optional[str] = None
    original_score: Optional[float] = None


class OptimizationResponse(VariationResponse):
    action: BanditAction
    exploration_rate: float
    learning_rate: float


class ABTestResponse(BaseModel):
    id: int
    ad_set_id: str
    test_name: str
    variation_a_id: int
    variation_b_id: int
    duration: int
    budget: float
    metrics: List[str]
    status: ABTestStatus
    start_date: datetime
    end_date: datetime
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ABTestDetailResponse(ABTestResponse):
    variation_a: Optional[AdCreativeResponse] = None
    variation_b: Optional[AdCreativeResponse] = None


class PerformanceRecordResponse(BaseModel):
    id: int
    ad_name: str
    ad_set_id: Optional[str] = None
    ad_account_id: Optional[str] = None
    impressions: int
    clicks: int
    conversions: int
    spend: float
    ctr: float
    cpc: float
    cpm: float
    source: PerformanceSourceType
    performance_data: Optional[Dict[str, Any]] = None
    recorded_at: datetime

    class Config:
        from_attributes = True


class InsightResponse(BaseModel):
    type: str
    ad: str
    score: float
    recommendation: str


class RecommendationsResponse(BaseModel):
    recommendations: List[str] = []
    insights: List[InsightResponse] = []
    performance_summary: Optional[Dict[str, Any]] = None


class IngestResponse(BaseModel):
    ingested: int
