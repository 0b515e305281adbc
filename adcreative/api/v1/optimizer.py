"""
Ad creative optimizer API endpoints
- Performance ingestion and lookup
- Explore/exploit optimization and variation generation
- A/B tests and recommendations
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from adcreative.core.deps import get_optimizer
from adcreative.schemas.common import DataResponse, ErrorResponse
from adcreative.schemas.optimizer import (
    ABTestCreateRequest,
    ABTestDetailResponse,
    ABTestResponse,
    AdCreativeResponse,
    GenerateVariationRequest,
    IngestRequest,
    IngestResponse,
    OptimizationResponse,
    OptimizeRequest,
    ParsedCreativeResponse,
    PerformanceRecordResponse,
    ProductContextIn,
    RecommendationsResponse,
    VariationResponse,
)
from adcreative.services.ab_test_manager import ABTestNotFoundError, ABTestStateError
from adcreative.services.optimizer import AdCreativeOptimizer
from adcreative.services.variation_generator import ProductContext, VariationResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ad-optimizer", tags=["Ad Optimizer"])


# ============================================
# Helpers
# ============================================


def _error(message: str) -> JSONResponse:
    """Generic 500 envelope; details stay in the server log"""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(exclude_none=True),
    )


def _product(product_in: Optional[ProductContextIn]) -> Optional[ProductContext]:
    if product_in is None:
        return None
    product = ProductContext()
    for key, value in product_in.model_dump(exclude_none=True).items():
        setattr(product, key, value)
    return product


def _variation_payload(variation: VariationResult) -> dict:
    return dict(
        ad_creative=AdCreativeResponse.model_validate(variation.creative),
        mode=variation.mode,
        generated_content=ParsedCreativeResponse(**variation.generated_content.to_dict()),
        original_ad=variation.original_ad,
        original_score=variation.original_score,
    )


# ============================================
# Performance
# ============================================


@router.post("/ad-accounts/{ad_account_id}/ingest", response_model=DataResponse[IngestResponse])
def ingest_performance(
    ad_account_id: str,
    payload: Optional[IngestRequest] = None,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Pull ad performance for an account and store it"""
    payload = payload or IngestRequest()
    try:
        records = optimizer.ingest_performance(ad_account_id, payload.date_range)
    except Exception:
        logger.exception(f"[ingest_performance] Failed for ad account {ad_account_id}")
        return _error("Failed to ingest performance data")

    return DataResponse(data=IngestResponse(ingested=len(records)))


@router.get("/ad-sets/{ad_set_id}/performance", response_model=DataResponse[list])
def get_performance(
    ad_set_id: str,
    days: int = Query(30, ge=1, le=365),
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Performance records for an ad set within the lookback window"""
    try:
        records = optimizer.get_performance(ad_set_id, days)
    except Exception:
        logger.exception(f"[get_performance] Failed for ad set {ad_set_id}")
        return _error("Failed to get performance data")

    return DataResponse(data=[PerformanceRecordResponse.model_validate(r) for r in records])


@router.get("/ad-sets/{ad_set_id}/performance/summary", response_model=DataResponse[list])
def get_performance_summary(
    ad_set_id: str,
    days: int = Query(30, ge=1, le=365),
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Per-ad totals and composite scores"""
    try:
        summary = optimizer.get_performance_summary(ad_set_id, days)
    except Exception:
        logger.exception(f"[get_performance_summary] Failed for ad set {ad_set_id}")
        return _error("Failed to get performance summary")

    return DataResponse(data=summary)


# ============================================
# Optimization
# ============================================


@router.post("/ad-sets/{ad_set_id}/optimize", response_model=DataResponse[OptimizationResponse])
def optimize_ad_creative(
    ad_set_id: str,
    payload: Optional[OptimizeRequest] = None,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Explore a new creative or exploit the best performer"""
    payload = payload or OptimizeRequest()
    try:
        result = optimizer.optimize(
            ad_set_id,
            exploration_rate=payload.exploration_rate,
            learning_rate=payload.learning_rate,
            product=_product(payload.product),
        )
    except Exception:
        logger.exception(f"[optimize_ad_creative] Failed for ad set {ad_set_id}")
        return _error("Failed to optimize ad creative")

    return DataResponse(data=OptimizationResponse(
        action=result.action,
        exploration_rate=result.exploration_rate,
        learning_rate=result.learning_rate,
        **_variation_payload(result.variation),
    ))


@router.post("/ad-sets/{ad_set_id}/variations", response_model=DataResponse[VariationResponse])
def generate_variation(
    ad_set_id: str,
    payload: Optional[GenerateVariationRequest] = None,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Generate one new creative variation"""
    payload = payload or GenerateVariationRequest()
    try:
        variation = optimizer.generate_variation(ad_set_id, payload.mode, product=_product(payload.product))
    except Exception:
        logger.exception(f"[generate_variation] Failed for ad set {ad_set_id}")
        return _error("Failed to generate ad variation")

    return DataResponse(data=VariationResponse(**_variation_payload(variation)))


@router.get("/ad-sets/{ad_set_id}/creatives", response_model=DataResponse[list])
def get_creatives(
    ad_set_id: str,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Creatives generated for an ad set, newest first"""
    try:
        creatives = optimizer.get_creatives(ad_set_id)
    except Exception:
        logger.exception(f"[get_creatives] Failed for ad set {ad_set_id}")
        return _error("Failed to get ad creatives")

    return DataResponse(data=[AdCreativeResponse.model_validate(c) for c in creatives])


@router.get("/ad-sets/{ad_set_id}/recommendations", response_model=DataResponse[RecommendationsResponse])
def get_recommendations(
    ad_set_id: str,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Best/worst performers and CTR/CPC warnings"""
    try:
        result = optimizer.get_recommendations(ad_set_id)
    except Exception:
        logger.exception(f"[get_recommendations] Failed for ad set {ad_set_id}")
        return _error("Failed to get optimization recommendations")

    return DataResponse(data=RecommendationsResponse(
        recommendations=result.recommendations,
        insights=result.insights,
        performance_summary=result.performance_summary,
    ))


# ============================================
# A/B tests
# ============================================


@router.post("/ad-sets/{ad_set_id}/ab-tests", response_model=DataResponse[ABTestDetailResponse])
def setup_ab_test(
    ad_set_id: str,
    payload: Optional[ABTestCreateRequest] = None,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Create an A/B test between two new exploration creatives"""
    payload = payload or ABTestCreateRequest()
    try:
        ab_test = optimizer.setup_ab_test(
            ad_set_id,
            test_name=payload.test_name,
            duration=payload.duration,
            budget=payload.budget,
            metrics=payload.metrics,
            product=_product(payload.product),
        )
    except Exception:
        logger.exception(f"[setup_ab_test] Failed for ad set {ad_set_id}")
        return _error("Failed to set up A/B test")

    return DataResponse(data=ABTestDetailResponse.model_validate(ab_test))


@router.get("/ad-sets/{ad_set_id}/ab-tests", response_model=DataResponse[list])
def get_ab_tests(
    ad_set_id: str,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """A/B tests for an ad set with both variations"""
    try:
        tests = optimizer.get_ab_tests(ad_set_id)
    except Exception:
        logger.exception(f"[get_ab_tests] Failed for ad set {ad_set_id}")
        return _error("Failed to get A/B tests")

    return DataResponse(data=[ABTestDetailResponse.model_validate(t) for t in tests])


def _transition_ab_test(action, test_id: int):
    try:
        ab_test = action(test_id)
    except ABTestNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ABTestStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception:
        logger.exception(f"[_transition_ab_test] Failed for A/B test {test_id}")
        return _error("Failed to update A/B test")

    return DataResponse(data=ABTestResponse.model_validate(ab_test))


@router.post("/ab-tests/{test_id}/complete", response_model=DataResponse[ABTestResponse])
def complete_ab_test(
    test_id: int,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Mark an active A/B test as completed"""
    return _transition_ab_test(optimizer.ab_tests.complete_test, test_id)


@router.post("/ab-tests/{test_id}/cancel", response_model=DataResponse[ABTestResponse])
def cancel_ab_test(
    test_id: int,
    optimizer: AdCreativeOptimizer = Depends(get_optimizer),
):
    """Cancel an active A/B test"""
    return _transition_ab_test(optimizer.ab_tests.cancel_test, test_id)
