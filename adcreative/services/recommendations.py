"""
Human readable optimization recommendations for an ad set
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from adcreative.core.config import settings
from adcreative.services.scoring import calculate_performance_scores, best_performer, worst_performer
from adcreative.services.store import Store

logger = logging.getLogger(__name__)

LOW_CTR_THRESHOLD = 1.0
HIGH_CPC_THRESHOLD = 2.0

NO_DATA_RECOMMENDATION = "No performance data available. Start with exploration mode."
LOW_CTR_RECOMMENDATION = "Low CTR detected. Focus on more compelling headlines and visuals."
HIGH_CPC_RECOMMENDATION = "High CPC detected. Optimize targeting and ad relevance."


@dataclass
class OptimizationRecommendation:
    recommendations: List[str] = field(default_factory=list)
    insights: List[dict] = field(default_factory=list)
    performance_summary: Optional[dict] = None


class RecommendationEngine:
    def __init__(self, store: Store, history_limit: Optional[int] = None):
        self.store = store
        self.history_limit = history_limit or settings.RECOMMENDATION_HISTORY_LIMIT

    def get_optimization_recommendations(self, ad_set_id: str) -> OptimizationRecommendation:
        records = self.store.find_performance_for_ad_set(ad_set_id, limit=self.history_limit)

        if not records:
            return OptimizationRecommendation(recommendations=[NO_DATA_RECOMMENDATION])

        scores = calculate_performance_scores(records)
        recommendations = []

        # Simple per-record means, independent of the composite score
        avg_ctr = sum(float(r.ctr or 0) for r in records) / len(records)
        avg_cpc = sum(float(r.cpc or 0) for r in records) / len(records)

        if avg_ctr < LOW_CTR_THRESHOLD:
            recommendations.append(LOW_CTR_RECOMMENDATION)
        if avg_cpc > HIGH_CPC_THRESHOLD:
            recommendations.append(HIGH_CPC_RECOMMENDATION)

        best_name, best_score = best_performer(scores)
        worst_name, worst_score = worst_performer(scores)

        insights = [
            {
                "type": "best_performer",
                "ad": best_name,
                "score": best_score.score,
                "recommendation": "Scale this ad and use as base for optimization",
            },
            {
                "type": "worst_performer",
                "ad": worst_name,
                "score": worst_score.score,
                "recommendation": "Pause this ad and learn from best performers",
            },
        ]

        logger.info(f"[Recommendations] {ad_set_id}: {len(records)} records, {len(scores)} ads scored")

        return OptimizationRecommendation(
            recommendations=recommendations,
            insights=insights,
            performance_summary={
                "total_ads": len(records),
                "avg_ctr": avg_ctr,
                "avg_cpc": avg_cpc,
                "best_score": best_score.score,
                "worst_score": worst_score.score,
            },
        )
