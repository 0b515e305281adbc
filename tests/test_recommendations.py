"""
Tests for optimization recommendations
"""
import pytest

from adcreative.services.recommendations import (
    HIGH_CPC_RECOMMENDATION,
    LOW_CTR_RECOMMENDATION,
    NO_DATA_RECOMMENDATION,
    RecommendationEngine,
)
from adcreative.services.store import Store


@pytest.fixture
def engine(db_session):
    return RecommendationEngine(Store(db_session))


def test_no_records_returns_single_recommendation(engine):
    result = engine.get_optimization_recommendations("adset-1")

    assert result.recommendations == [NO_DATA_RECOMMENDATION]
    assert result.insights == []
    assert result.performance_summary is None


def test_healthy_ads_have_no_warnings(engine, make_record):
    # CTR 5%, CPC $0.50
    make_record(ad_name="Teal Shirt Ad A")

    result = engine.get_optimization_recommendations("Teal Shirt")

    assert result.recommendations == []
    assert [i["type"] for i in result.insights] == ["best_performer", "worst_performer"]


def test_low_ctr_and_high_cpc(engine, make_record):
    # CTR 0.5%, CPC $10
    make_record(ad_name="Teal Shirt Ad A", impressions=1000, clicks=5, spend=50, conversions=0)

    result = engine.get_optimization_recommendations("Teal Shirt")

    assert result.recommendations == [LOW_CTR_RECOMMENDATION, HIGH_CPC_RECOMMENDATION]


def test_thresholds_use_unweighted_record_means(engine, make_record):
    # Mean of per-record CTR is (0.5 + 0.5) / 2 even though totals differ
    make_record(ad_name="Teal Shirt Ad A", impressions=100000, clicks=500, spend=100, conversions=0, ctr=0.5, cpc=0.2)
    make_record(ad_name="Teal Shirt Ad B", impressions=100, clicks=1, spend=5, conversions=0, ctr=0.5, cpc=5.0)

    result = engine.get_optimization_recommendations("Teal Shirt")

    assert result.performance_summary["avg_ctr"] == pytest.approx(0.5)
    assert result.performance_summary["avg_cpc"] == pytest.approx(2.6)
    assert result.recommendations == [LOW_CTR_RECOMMENDATION, HIGH_CPC_RECOMMENDATION]


def test_best_and_worst_insights(engine, make_record):
    make_record(ad_name="Teal Shirt Ad A", impressions=1000, clicks=50, spend=25, conversions=5)
    make_record(ad_name="Teal Shirt Ad B", impressions=1000, clicks=5, spend=50, conversions=0)

    result = engine.get_optimization_recommendations("Teal Shirt")

    best, worst = result.insights
    assert best["ad"] == "Teal Shirt Ad A"
    assert best["score"] == pytest.approx(6.4)
    assert best["recommendation"] == "Scale this ad and use as base for optimization"
    assert worst["ad"] == "Teal Shirt Ad B"
    assert worst["recommendation"] == "Pause this ad and learn from best performers"

    summary = result.performance_summary
    assert summary["total_ads"] == 2
    assert summary["best_score"] == pytest.approx(6.4)
    assert summary["worst_score"] == pytest.approx(0.22)


def test_single_ad_is_best_and_worst(engine, make_record):
    make_record(ad_name="Teal Shirt Ad A")

    result = engine.get_optimization_recommendations("Teal Shirt")

    assert result.insights[0]["ad"] == result.insights[1]["ad"] == "Teal Shirt Ad A"
